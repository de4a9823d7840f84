from datetime import date

from engine.calendar import DEFAULT_CALENDAR, TradingCalendar, is_tradable, iterate


def test_weekends_and_holidays_are_not_tradable():
    assert not is_tradable(date(2024, 1, 1))   # 元旦
    assert is_tradable(date(2024, 1, 2))
    assert not is_tradable(date(2024, 1, 6))   # 周六
    assert not is_tradable(date(2024, 1, 7))   # 周日
    assert not is_tradable(date(2024, 10, 1))  # 国庆
    assert not is_tradable(date(2025, 1, 29))  # 春节


def test_iterate_is_ascending_and_inclusive():
    days = list(iterate(date(2024, 1, 1), date(2024, 1, 8)))
    assert days == [
        date(2024, 1, 2),
        date(2024, 1, 3),
        date(2024, 1, 4),
        date(2024, 1, 5),
        date(2024, 1, 8),
    ]


def test_iterate_empty_when_start_after_end():
    assert DEFAULT_CALENDAR.trading_days(date(2024, 2, 1), date(2024, 1, 1)) == []


def test_custom_holidays():
    cal = TradingCalendar(holidays=["2024-01-03"])
    assert cal.is_tradable(date(2024, 1, 1))
    assert not cal.is_tradable(date(2024, 1, 3))
    assert len(cal.trading_days(date(2024, 1, 1), date(2024, 1, 5))) == 4
