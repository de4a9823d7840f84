import sys
from pathlib import Path

# 顶层包（shared/engine/strategy/...）均为命名空间包，测试需从仓库根目录导入
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)
