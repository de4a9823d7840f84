"""价格/权益序列（供图表使用）。

每个交易日一个 ChartPoint：
- 有成交的日期直接使用账本的成交价与方向，保证图表与账本逐日一致；
- 其余日期用一个更小的、仅用于图表的确定性随机游走推进价格；
- 均线为尾随窗口的算术平均，区间开头不足窗口时按已有点数求均值；
- 权益：买入时现金全部折算为持股，持仓期间按价格盯市，卖出时兑现盈亏回到空仓。
"""

from __future__ import annotations

import math
from dataclasses import asdict
from datetime import date

import pandas as pd

from engine.calendar import DEFAULT_CALENDAR, TradingCalendar
from engine.rng import SeedStream
from shared.config.schema import ParameterSet
from shared.models.models import ChartPoint, Trade
from shared.utils.hashing import hash32
from shared.utils.precision import clamp_float, round_cents
from strategy.profiles import StrategyKind, StrategyProfile
from strategy.registry import get_profile

CHART_VOLATILITY = 0.02
DEFAULT_START_PRICE = 1220.0
MIN_PRICE = 1.0
START_DISCOUNT = 0.95


def series_seed(instrument_code: str, params: ParameterSet) -> int:
    return hash32(f"series-{instrument_code}-{params.start_date.isoformat()}-{params.end_date.isoformat()}")


def _window(value: float, default: int) -> int:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(v):
        return default
    return max(int(round(v)), 1)


def resolve_ma_windows(params: ParameterSet, profile: StrategyProfile | None = None) -> tuple[int, int]:
    """均线窗口：有画像时按画像取，否则取 short_period/long_period。"""
    short, long = profile.ma_windows(params) if profile is not None else (params.short_period, params.long_period)
    return _window(short, 5), _window(long, 10)


def build_series(
    params: ParameterSet,
    ledger: list[Trade],
    instrument_code: str,
    *,
    profile: StrategyProfile | StrategyKind | str | None = None,
    calendar: TradingCalendar = DEFAULT_CALENDAR,
) -> list[ChartPoint]:
    """逐交易日构建图表序列；start_date > end_date 时为空列表。"""
    days: list[date] = calendar.trading_days(params.start_date, params.end_date)
    if not days:
        return []

    resolved = get_profile(profile) if profile is not None else None
    short_window, long_window = resolve_ma_windows(params, resolved)
    trades_by_date = {t.date: t for t in ledger}
    stream = SeedStream(series_seed(instrument_code, params))

    price = ledger[0].price * START_DISCOUNT if ledger else DEFAULT_START_PRICE
    cash = clamp_float(params.initial_capital)
    shares = 0.0
    entry_price = 0.0
    holding = False

    rows: list[dict] = []
    for day_index, day in enumerate(days):
        iso = day.isoformat()
        trade = trades_by_date.get(iso)
        signal: str | None = None

        if trade is not None:
            price = trade.price
            if trade.direction == "Buy":
                signal = "buy"
                if not holding and price > 0:
                    shares = cash / price
                    entry_price = price
                    holding = True
            else:
                signal = "sell"
                if holding:
                    cash += shares * (price - entry_price)
                    shares = 0.0
                    holding = False
        else:
            price = max(price * (1 + (stream.daily(day_index, 1) - 0.5) * CHART_VOLATILITY), MIN_PRICE)

        equity = cash + shares * (price - entry_price) if holding else cash
        rows.append(
            {
                "date": iso,
                "price": price,
                "equity": equity,
                "signal": signal,
                "pl": trade.pl if trade is not None else None,
            }
        )

    closes = pd.Series([r["price"] for r in rows], dtype="float64")
    ma_short = closes.rolling(short_window, min_periods=1).mean()
    ma_long = closes.rolling(long_window, min_periods=1).mean()

    return [
        ChartPoint(
            date=row["date"],
            price=round_cents(row["price"]),
            ma_short=round_cents(float(ma_short.iloc[i])),
            ma_long=round_cents(float(ma_long.iloc[i])),
            equity=round_cents(row["equity"]),
            signal=row["signal"],
            pl=row["pl"],
        )
        for i, row in enumerate(rows)
    ]


def series_to_frame(points: list[ChartPoint]) -> pd.DataFrame:
    """转为 DataFrame（导出 equity.csv 用）。"""
    if not points:
        return pd.DataFrame(columns=["date", "price", "ma_short", "ma_long", "equity", "signal", "pl"])
    return pd.DataFrame([asdict(p) for p in points])
