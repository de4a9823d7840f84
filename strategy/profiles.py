"""策略画像（StrategyProfile）。

每个策略模板是一个固定的、不可变的变体，决定：
- 哪些 ParameterSet 字段与之相关（滑杆 + 代码中的参数 token）；
- 账本生成的行为参数（开仓概率、平均持仓天数、波动率等）；
- 图表均线窗口。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from shared.config.schema import ParameterSet
from strategy import templates


class StrategyKind(str, Enum):
    DUAL_MA = "DualMA"
    SINGLE_MA = "SingleMA"
    SMALL_CAP = "SmallCap"
    GRID = "Grid"
    T0 = "T0"
    LIMIT_UP = "LimitUp"


@dataclass(frozen=True)
class SliderSpec:
    """UI 滑杆的取值范围（核心计算不依赖它，越界值同样要能跑）。"""
    field: str
    label: str
    min: float
    max: float
    step: float = 1
    unit: str = ""

    def clamp(self, value: float) -> float:
        return min(max(float(value), self.min), self.max)


@dataclass(frozen=True)
class BehaviorProfile:
    """账本生成的行为参数。"""
    entry_prob: float = 0.02       # 空仓时每日开仓概率
    hold_mean: float = 10          # 平均持仓天数（每日离场概率 = 1/hold_mean）
    volatility: float = 0.03       # 日内随机游走幅度
    return_scale: float = 1.0      # 抽样离场收益的缩放（T0 日内波幅小）
    take_profit_field: str = "take_profit"
    stop_loss_field: str = "stop_loss"
    default_take_profit: float = 10
    default_stop_loss: float = 5
    # 盈利时使用固定区间（如打板 9%~11%），None 表示按止盈参数
    fixed_win_range: tuple[float, float] | None = None
    monthly_rebalance: bool = False


def _fixed_windows(short: int, long: int) -> Callable[[ParameterSet], tuple[float, float]]:
    return lambda params: (short, long)


@dataclass(frozen=True)
class StrategyProfile:
    kind: StrategyKind
    display_name: str
    template: str
    # ParameterSet 字段 -> 代码 token
    tokens: dict[str, str]
    sliders: tuple[SliderSpec, ...]
    behavior: BehaviorProfile = field(default_factory=BehaviorProfile)
    ma_windows: Callable[[ParameterSet], tuple[float, float]] = _fixed_windows(5, 10)
    requires_index: bool = False

    @property
    def name(self) -> str:
        return self.kind.value

    def slider(self, field_name: str) -> SliderSpec | None:
        for spec in self.sliders:
            if spec.field == field_name:
                return spec
        return None


_TP = SliderSpec("take_profit", "止盈比例 (TP %)", 5, 50, 1, "%")
_SL = SliderSpec("stop_loss", "止损比例 (SL %)", 1, 20, 1, "%")

DUAL_MA = StrategyProfile(
    kind=StrategyKind.DUAL_MA,
    display_name="双均线策略",
    template=templates.DUAL_MA,
    tokens={
        "short_period": "period_fast",
        "long_period": "period_slow",
        "stop_loss": "stop_loss",
        "take_profit": "take_profit",
    },
    sliders=(
        SliderSpec("short_period", "短期均线 (MA Fast)", 2, 20),
        SliderSpec("long_period", "长期均线 (MA Slow)", 10, 60),
        _TP,
        _SL,
    ),
    ma_windows=lambda params: (params.short_period, params.long_period),
)

SINGLE_MA = StrategyProfile(
    kind=StrategyKind.SINGLE_MA,
    display_name="单均线策略",
    template=templates.SINGLE_MA,
    tokens={
        "short_period": "period",
        "stop_loss": "stop_loss",
        "take_profit": "take_profit",
    },
    sliders=(
        SliderSpec("short_period", "均线周期 (MA Period)", 5, 60),
        _TP,
        _SL,
    ),
    ma_windows=lambda params: (params.short_period, 20),
)

SMALL_CAP = StrategyProfile(
    kind=StrategyKind.SMALL_CAP,
    display_name="小市值策略",
    template=templates.SMALL_CAP,
    tokens={
        "volume_ratio": "volume_ratio",
        "pe_ratio": "pe_ratio",
    },
    sliders=(
        SliderSpec("volume_ratio", "量比阈值 (Volume Ratio)", 0.5, 5.0, 0.1),
        SliderSpec("pe_ratio", "市盈率上限 (PE Ratio)", 10, 100),
    ),
    behavior=BehaviorProfile(entry_prob=0.05, hold_mean=20, monthly_rebalance=True),
    requires_index=True,
)

GRID = StrategyProfile(
    kind=StrategyKind.GRID,
    display_name="网格策略",
    template=templates.GRID,
    tokens={
        "grid_step": "grid_step",
        "grid_size": "grid_size",
        "stop_loss": "stop_loss",
        "take_profit": "take_profit",
    },
    sliders=(
        SliderSpec("grid_step", "网格间距 (Grid Step %)", 0.5, 10.0, 0.1, "%"),
        SliderSpec("grid_size", "单笔数量 (Grid Size)", 100, 5000),
        _TP,
        _SL,
    ),
    behavior=BehaviorProfile(entry_prob=0.15, hold_mean=3),
)

T0 = StrategyProfile(
    kind=StrategyKind.T0,
    display_name="T0策略",
    template=templates.T0,
    tokens={
        "t0_threshold": "threshold",
        "t0_take_profit": "take_profit",
        "t0_stop_loss": "stop_loss",
    },
    sliders=(
        SliderSpec("t0_threshold", "开仓偏离 (Threshold %)", 0.1, 3.0, 0.1, "%"),
        SliderSpec("t0_take_profit", "止盈比例 (TP %)", 0.5, 5.0, 0.1, "%"),
        SliderSpec("t0_stop_loss", "止损比例 (SL %)", 0.5, 5.0, 0.1, "%"),
    ),
    behavior=BehaviorProfile(
        entry_prob=0.3,
        hold_mean=1,
        volatility=0.015,
        return_scale=0.2,
        take_profit_field="t0_take_profit",
        stop_loss_field="t0_stop_loss",
        default_take_profit=1.5,
        default_stop_loss=1.0,
    ),
)

LIMIT_UP = StrategyProfile(
    kind=StrategyKind.LIMIT_UP,
    display_name="打板策略",
    template=templates.LIMIT_UP,
    tokens={
        "limit_up_threshold": "threshold",
        "limit_up_volume_ratio": "volume_ratio",
        "limit_up_speed_threshold": "speed_threshold",
    },
    sliders=(
        SliderSpec("limit_up_threshold", "打板阈值 (Threshold %)", 5.0, 19.0, 0.1, "%"),
        SliderSpec("limit_up_volume_ratio", "量比阈值 (Volume Ratio)", 0.5, 5.0, 0.1),
        SliderSpec("limit_up_speed_threshold", "涨速阈值 (Speed %)", 1.0, 9.0, 0.1, "%"),
    ),
    behavior=BehaviorProfile(entry_prob=0.05, hold_mean=2, fixed_win_range=(9.0, 11.0)),
)
