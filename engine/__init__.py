"""模拟引擎层（engine）。

确定性核心：rng -> signature -> calendar -> ledger -> metrics / series；
统一入口 `SandboxEngine.run() -> EngineResult`，命令行入口由仓库根目录 `main.py` 承载。
"""
