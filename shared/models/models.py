"""核心数据结构：Trade/Metrics/ChartPoint/ValidationResult/SimulationResult。

全部是纯数据，交给（不在本仓库内的）渲染层展示。
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

@dataclass(frozen=True)
class Trade:
    """单笔模拟成交。"""
    date: str         # ISO 日期
    direction: str    # "Buy" / "Sell"
    price: float
    pl: float | None = None      # 仅平仓的 Sell 带已实现盈亏
    reason: str | None = None    # signal / take_profit / stop_loss / rebalance / end_of_range


@dataclass(frozen=True)
class Metrics:
    """绩效指标快照（百分比字段单位为 %）。"""
    annual_return: float
    benchmark_return: float
    sharpe_ratio: float
    max_drawdown: float
    win_rate: float
    trade_count: int

    def as_display(self) -> dict[str, str]:
        """格式化为面板展示用字符串。"""
        return {
            "annualReturn": f"{self.annual_return:.2f}%",
            "benchmarkReturn": f"{self.benchmark_return:.2f}%",
            "sharpeRatio": f"{self.sharpe_ratio:.2f}",
            "maxDrawdown": f"{self.max_drawdown:.2f}%",
            "winRate": f"{self.win_rate:.1f}%",
            "tradeCount": str(self.trade_count),
        }


# 首次回测前展示的占位指标
DEFAULT_METRICS = Metrics(
    annual_return=25.50,
    benchmark_return=8.00,
    sharpe_ratio=1.20,
    max_drawdown=7.00,
    win_rate=62.0,
    trade_count=66,
)

@dataclass(frozen=True)
class ChartPoint:
    """单个交易日的价格/均线/权益/信号快照。"""
    date: str
    price: float
    ma_short: float
    ma_long: float
    equity: float
    signal: str | None = None    # "buy" / "sell"
    pl: float | None = None


@dataclass
class ValidationResult:
    """运行前校验结果；不合法时 reasons 给出可展示的原因。"""
    reasons: list[str] = field(default_factory=list)
    range_invalid: bool = False
    order_invalid: bool = False
    listing_invalid: bool = False
    instrument_invalid: bool = False

    @property
    def ok(self) -> bool:
        return not self.reasons

    @property
    def refused(self) -> bool:
        """参数顺序、代码结构或标的不合法时拒绝运行；日期区间非法只产出空结果。"""
        return self.order_invalid or self.listing_invalid or self.instrument_invalid


@dataclass(frozen=True)
class SimulationResult:
    """一次模拟的全部产物（同一签名下三者互相一致）。"""
    signature: str
    trades: list[Trade]
    metrics: Metrics
    series: list[ChartPoint]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
