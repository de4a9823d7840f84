"""配置架构定义（Pydantic Schema）。

目标：
- 让参数集合成为“强类型 + 整体替换”的边界协议；
- 启动阶段尽早失败，避免 typo/类型错误在回测中“隐蔽爆炸”；
- 参数越界（超出滑杆范围）不在这里拦截：核心计算自行容忍。
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ParameterSet(BaseModel):
    """策略参数集合（对应 UI 的全部滑杆 + 资金/日期）。

    说明：
    - 每次变更都整体替换（`model_copy(update=...)` / `model_validate`），不原地修改；
    - 各策略只使用其中一部分字段，其余字段在切换/编辑代码时必须原样保留。
    """

    initial_capital: int = 100000
    start_date: date = date(2024, 1, 1)
    end_date: date = date(2025, 12, 1)

    # 均线
    short_period: float = 10
    long_period: float = 20

    # 风控
    stop_loss: float = 5
    take_profit: float = 15

    # 小市值
    volume_ratio: float = 1.5
    pe_ratio: float = 30

    # 网格
    grid_step: float = 2.0
    grid_size: float = 1000

    # T0
    t0_threshold: float = 0.5  # 相对昨收的偏离 %
    t0_take_profit: float = 1.5
    t0_stop_loss: float = 1.0

    # 打板
    limit_up_threshold: float = 9.0
    limit_up_volume_ratio: float = 1.2
    limit_up_speed_threshold: float = 3.0

    model_config = ConfigDict(extra="forbid", frozen=True)


class SandboxConfig(BaseModel):
    """沙盒会话配置（对应 config/sandbox.yml）。"""

    strategy: str = "DualMA"
    instrument: str = "300539.SZ"
    params: ParameterSet = Field(default_factory=ParameterSet)
    # 模拟“长时间回测”的展示延迟，不影响结果
    run_delay_secs: float = 0.8
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    output_dir: str | None = None

    model_config = ConfigDict(extra="forbid")
