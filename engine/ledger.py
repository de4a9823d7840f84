"""交易账本生成器。

把 (策略, 标的, 参数) 确定性地转换为按日期升序、买卖严格交替的模拟成交序列。

流程：
1. 由签名得到 seed，逐个交易日推进（day_index 只在交易日递增）；
2. 合成价格做乘性随机游走，波动率由策略画像决定；
3. 单仓位状态机：空仓 -> (开仓信号) -> 持仓 -> (信号/止损/止盈/区间末强平) -> 空仓；
4. 小市值策略不按日概率开仓，而是在月份切换时调仓。

区间结束前最后两个交易日内的持仓会被强制平仓，账本永远不会停在持仓状态。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from engine.calendar import DEFAULT_CALENDAR, TradingCalendar
from engine.rng import SeedStream
from engine.signature import seed_for
from shared.config.schema import ParameterSet
from shared.models.models import Trade
from shared.utils.precision import clamp_float, round_cents
from strategy.profiles import BehaviorProfile, StrategyKind, StrategyProfile
from strategy.registry import get_profile

MIN_PRICE = 1.0
MAX_LOSS_PCT = 95.0
WIN_THRESHOLD = 0.45       # 胜负抽样阈值，基础胜率约 55%
POSITION_FRACTION = 0.5    # 每笔使用初始资金的比例

# 每日抽样的 offset 约定
_OFFSET_ENTRY = 5
_OFFSET_WALK = 1
_OFFSET_EXIT = 2
_OFFSET_WIN = 3
_OFFSET_MAGNITUDE = 4
_OFFSET_FIXED_WIN = 6


@dataclass
class _Position:
    entry_price: float
    shares: int


def _positive_or(value: float, default: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) and v > 0 else default


def position_shares(initial_capital: float, entry_price: float) -> int:
    """固定比例仓位：初始资金的一半按开仓价折算整股。"""
    if entry_price <= 0:
        return 0
    budget = clamp_float(initial_capital) * POSITION_FRACTION
    if not math.isfinite(budget) or budget <= 0:
        return 0
    return int(math.floor(budget / entry_price))


def _draw_exit_return(
    stream: SeedStream,
    day_index: int,
    behavior: BehaviorProfile,
    take_profit: float,
    stop_loss: float,
) -> float:
    is_win = stream.daily(day_index, _OFFSET_WIN) > WIN_THRESHOLD
    magnitude = stream.daily(day_index, _OFFSET_MAGNITUDE)
    if is_win:
        if behavior.fixed_win_range is not None:
            lo, hi = behavior.fixed_win_range
            return (lo + stream.daily(day_index, _OFFSET_FIXED_WIN) * (hi - lo)) / 100
        return (0.5 + magnitude * take_profit) / 100 * behavior.return_scale
    return -min(0.5 + magnitude * stop_loss, MAX_LOSS_PCT) / 100 * behavior.return_scale


def generate_trades(
    profile: StrategyProfile | StrategyKind | str,
    instrument_code: str,
    params: ParameterSet,
    *,
    calendar: TradingCalendar = DEFAULT_CALENDAR,
) -> list[Trade]:
    """生成模拟成交序列。

    Parameters
    ----------
    profile:
        策略画像（或其名称）。
    instrument_code:
        标的代码，参与签名。
    params:
        参数集合；越界值不会抛错（止盈止损非正数时回退到画像默认值）。
    calendar:
        交易日历，默认沪深交易所。

    Returns
    -------
    list[Trade]
        升序、买卖交替、以空仓结束；start_date > end_date 时为空列表。
    """
    profile = get_profile(profile)
    days: list[date] = calendar.trading_days(params.start_date, params.end_date)
    if not days:
        return []

    behavior = profile.behavior
    take_profit = _positive_or(getattr(params, behavior.take_profit_field), behavior.default_take_profit)
    stop_loss = min(_positive_or(getattr(params, behavior.stop_loss_field), behavior.default_stop_loss), MAX_LOSS_PCT)
    exit_prob = 1.0 / max(behavior.hold_mean, 1.0)

    stream = SeedStream(seed_for(profile, instrument_code, params))
    price = 1000 + stream.draw(0) * 1000

    trades: list[Trade] = []
    position: _Position | None = None
    pending_entry = False
    last_month: tuple[int, int] | None = None
    last_index = len(days) - 1

    for day_index, day in enumerate(days):
        price = max(price * (1 + (stream.daily(day_index, _OFFSET_WALK) - 0.5) * behavior.volatility), MIN_PRICE)
        month = (day.year, day.month)
        month_turn = month != last_month
        last_month = month

        if position is not None:
            move = price / position.entry_price - 1
            ret: float | None = None
            reason = "signal"
            if day_index >= last_index - 1:
                ret = _draw_exit_return(stream, day_index, behavior, take_profit, stop_loss)
                reason = "end_of_range"
            elif behavior.monthly_rebalance and month_turn:
                ret = _draw_exit_return(stream, day_index, behavior, take_profit, stop_loss)
                reason = "rebalance"
                pending_entry = True
            elif move <= -stop_loss / 100:
                ret = -stop_loss / 100
                reason = "stop_loss"
            elif move >= take_profit / 100:
                ret = take_profit / 100
                reason = "take_profit"
            elif not behavior.monthly_rebalance and stream.daily(day_index, _OFFSET_EXIT) < exit_prob:
                ret = _draw_exit_return(stream, day_index, behavior, take_profit, stop_loss)

            if ret is not None:
                sell_price = round_cents(position.entry_price * (1 + ret))
                pl = round_cents((sell_price - position.entry_price) * position.shares)
                trades.append(Trade(date=day.isoformat(), direction="Sell", price=sell_price, pl=pl, reason=reason))
                position = None
                # 价格跟随成交价继续游走
                price = max(sell_price, MIN_PRICE)
            continue

        # 最后一个交易日不开仓，否则无法在区间内平仓
        if day_index >= last_index:
            continue

        if behavior.monthly_rebalance:
            should_enter = month_turn or pending_entry
        else:
            should_enter = stream.daily(day_index, _OFFSET_ENTRY) < behavior.entry_prob

        if should_enter:
            entry_price = round_cents(price)
            position = _Position(entry_price=entry_price, shares=position_shares(params.initial_capital, entry_price))
            pending_entry = False
            trades.append(Trade(date=day.isoformat(), direction="Buy", price=entry_price))

    return trades
