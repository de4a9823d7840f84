from datetime import date

from engine.calendar import DEFAULT_CALENDAR
from engine.ledger import generate_trades
from engine.metrics import BENCHMARK_RANGE, WIN_RATE_CAP, summarize
from engine.series import DEFAULT_START_PRICE, build_series, resolve_ma_windows, series_to_frame
from shared.config.schema import ParameterSet
from shared.models.models import DEFAULT_METRICS, Metrics
from strategy.registry import get_profile, list_profiles


def test_trade_count_is_ledger_length():
    params = ParameterSet()
    for length in (0, 3, 66):
        assert summarize("DualMA", "300539.SZ", params, length).trade_count == length


def test_metrics_ranges_and_determinism():
    for profile in list_profiles():
        for stop_loss in range(1, 21):
            params = ParameterSet(stop_loss=stop_loss)
            m = summarize(profile, "300539.SZ", params, 10)
            assert m == summarize(profile, "300539.SZ", params, 10)
            assert 5 <= m.annual_return <= 55
            assert 6 <= m.max_drawdown <= 15
            assert m.win_rate <= WIN_RATE_CAP
            assert BENCHMARK_RANGE[0] <= m.benchmark_return <= BENCHMARK_RANGE[1]


def test_benchmark_does_not_depend_on_strategy():
    params = ParameterSet()
    values = {summarize(p, "300539.SZ", params, 0).benchmark_return for p in list_profiles()}
    assert len(values) == 1


def test_metrics_display_format():
    display = DEFAULT_METRICS.as_display()
    assert display["annualReturn"] == "25.50%"
    assert display["winRate"] == "62.0%"
    assert display["tradeCount"] == "66"
    assert Metrics(1.234, 0, 0.5, 7, 50.05, 2).as_display()["sharpeRatio"] == "0.50"


def test_series_has_one_point_per_trading_day_and_matches_trades():
    params = ParameterSet(start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))
    trades = generate_trades("DualMA", "300539.SZ", params)
    series = build_series(params, trades, "300539.SZ", profile="DualMA")

    days = DEFAULT_CALENDAR.trading_days(params.start_date, params.end_date)
    assert [p.date for p in series] == [d.isoformat() for d in days]

    by_date = {p.date: p for p in series}
    for t in trades:
        point = by_date[t.date]
        assert point.price == t.price
        assert point.signal == t.direction.lower()
        assert point.pl == t.pl
    assert all(p.signal is None for p in series if p.date not in {t.date for t in trades})


def test_series_equity_flat_without_trades():
    params = ParameterSet(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31), initial_capital=50000)
    series = build_series(params, [], "300539.SZ")
    assert series
    assert all(p.equity == 50000 for p in series)
    assert abs(series[0].price - DEFAULT_START_PRICE) <= DEFAULT_START_PRICE * 0.011
    # 区间开头不足窗口时按已有点数求均值
    assert series[0].ma_short == series[0].price == series[0].ma_long


def test_series_equity_realizes_trade_return():
    params = ParameterSet()
    trades = generate_trades("DualMA", "300539.SZ", params)
    series = build_series(params, trades, "300539.SZ", profile="DualMA")
    buy, sell = trades[0], trades[1]
    by_date = {p.date: p for p in series}
    expected = params.initial_capital * sell.price / buy.price
    assert abs(by_date[sell.date].equity - expected) < 0.02


def test_series_deterministic_and_empty_range():
    params = ParameterSet(start_date=date(2024, 3, 1), end_date=date(2024, 4, 30))
    trades = generate_trades("Grid", "300539.SZ", params)
    assert build_series(params, trades, "300539.SZ") == build_series(params, trades, "300539.SZ")

    empty = ParameterSet(start_date=date(2024, 5, 1), end_date=date(2024, 4, 1))
    assert build_series(empty, [], "300539.SZ") == []
    assert list(series_to_frame([]).columns) == ["date", "price", "ma_short", "ma_long", "equity", "signal", "pl"]


def test_ma_windows_follow_profile():
    params = ParameterSet(short_period=7, long_period=30)
    assert resolve_ma_windows(params) == (7, 30)
    assert resolve_ma_windows(params, get_profile("DualMA")) == (7, 30)
    assert resolve_ma_windows(params, get_profile("SingleMA")) == (7, 20)
    assert resolve_ma_windows(params, get_profile("Grid")) == (5, 10)
    assert resolve_ma_windows(ParameterSet(short_period=0, long_period=-3)) == (1, 1)
