"""绩效指标汇总。

各指标从同一 seed 家族按不同 offset 抽样，避免相互相关；
交易笔数必须由调用方传入（即账本长度），这里绝不重新推导。
"""

from __future__ import annotations

from engine.rng import SeedStream
from engine.signature import seed_for
from shared.config.schema import ParameterSet
from shared.models.models import Metrics
from shared.utils.hashing import hash32
from shared.utils.precision import snap_to_decimals
from strategy.profiles import StrategyKind, StrategyProfile
from strategy.registry import get_profile

WIN_RATE_CAP = 95.0
BENCHMARK_RANGE = (-5.0, 15.0)


def benchmark_seed(instrument_code: str, params: ParameterSet) -> int:
    """基准收益只取决于标的与区间，与策略无关。"""
    return hash32(f"benchmark-{instrument_code}-{params.start_date.isoformat()}-{params.end_date.isoformat()}")


def summarize(
    profile: StrategyProfile | StrategyKind | str,
    instrument_code: str,
    params: ParameterSet,
    ledger_length: int,
) -> Metrics:
    """生成指标快照，`trade_count` 恒等于 `ledger_length`。"""
    profile = get_profile(profile)
    stream = SeedStream(seed_for(profile, instrument_code, params))

    annual_return = stream.scaled(1, 5, 55)
    max_drawdown = stream.scaled(2, 6, 15)
    sharpe = annual_return / 20 + stream.scaled(3, 0, 0.5)
    win_rate = min(45 + annual_return * 0.4 + stream.scaled(4, 0, 10), WIN_RATE_CAP)
    benchmark = SeedStream(benchmark_seed(instrument_code, params)).scaled(1, *BENCHMARK_RANGE)

    return Metrics(
        annual_return=snap_to_decimals(annual_return, 2),
        benchmark_return=snap_to_decimals(benchmark, 2),
        sharpe_ratio=snap_to_decimals(sharpe, 2),
        max_drawdown=snap_to_decimals(max_drawdown, 2),
        win_rate=snap_to_decimals(win_rate, 1),
        trade_count=int(ledger_length),
    )
