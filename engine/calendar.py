"""A 股交易日历：周末 + 沪深交易所休市日。"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Iterator

# 沪深交易所休市日（仅列出工作日；周末本身不交易）
EXCHANGE_HOLIDAYS: frozenset[str] = frozenset(
    {
        # 2024
        "2024-01-01",
        "2024-02-09", "2024-02-12", "2024-02-13", "2024-02-14", "2024-02-15", "2024-02-16",
        "2024-04-04", "2024-04-05",
        "2024-05-01", "2024-05-02", "2024-05-03",
        "2024-06-10",
        "2024-09-16", "2024-09-17",
        "2024-10-01", "2024-10-02", "2024-10-03", "2024-10-04", "2024-10-07",
        # 2025
        "2025-01-01",
        "2025-01-28", "2025-01-29", "2025-01-30", "2025-01-31", "2025-02-03", "2025-02-04",
        "2025-04-04",
        "2025-05-01", "2025-05-02", "2025-05-05",
        "2025-06-02",
        "2025-10-01", "2025-10-02", "2025-10-03", "2025-10-06", "2025-10-07", "2025-10-08",
        # 2026
        "2026-01-01", "2026-01-02",
        "2026-02-16", "2026-02-17", "2026-02-18", "2026-02-19", "2026-02-20", "2026-02-23",
        "2026-04-06",
        "2026-05-01", "2026-05-04", "2026-05-05",
        "2026-06-19",
        "2026-09-25",
        "2026-10-01", "2026-10-02", "2026-10-05", "2026-10-06", "2026-10-07",
    }
)


class TradingCalendar:
    """按日期判断是否可交易，并枚举区间内的交易日。"""

    def __init__(self, holidays: Iterable[str | date] = EXCHANGE_HOLIDAYS):
        self.holidays: frozenset[date] = frozenset(
            d if isinstance(d, date) else date.fromisoformat(d) for d in holidays
        )

    def is_tradable(self, day: date) -> bool:
        return day.weekday() < 5 and day not in self.holidays

    def iterate(self, start: date, end: date) -> Iterator[date]:
        """升序枚举 [start, end] 内的交易日；start > end 时为空。"""
        current = start
        one_day = timedelta(days=1)
        while current <= end:
            if self.is_tradable(current):
                yield current
            current += one_day

    def trading_days(self, start: date, end: date) -> list[date]:
        return list(self.iterate(start, end))


DEFAULT_CALENDAR = TradingCalendar()


def is_tradable(day: date) -> bool:
    return DEFAULT_CALENDAR.is_tradable(day)


def iterate(start: date, end: date) -> Iterator[date]:
    return DEFAULT_CALENDAR.iterate(start, end)
