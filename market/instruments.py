"""回测标的池与策略适用性。

`CSI_300`（沪深300）是综合指数哨兵：只有小市值策略能用它，小市值策略也只能用它。
"""

from __future__ import annotations

from dataclasses import dataclass

from strategy.profiles import StrategyKind, StrategyProfile
from strategy.registry import get_profile

COMPOSITE_INDEX = "CSI_300"


@dataclass(frozen=True)
class Instrument:
    code: str
    name: str

    @property
    def is_index(self) -> bool:
        return self.code == COMPOSITE_INDEX


INSTRUMENT_POOL: tuple[Instrument, ...] = (
    Instrument("300539.SZ", "横河精密"),
    Instrument("603019.SH", "中科曙光"),
    Instrument("301232.SZ", "飞沃科技"),
    Instrument("603286.SH", "日盈电子"),
    Instrument("601138.SH", "工业富联"),
    Instrument(COMPOSITE_INDEX, "沪深300"),
)


def get_instrument(code: str) -> Instrument:
    for inst in INSTRUMENT_POOL:
        if inst.code == code:
            return inst
    raise ValueError(f"Unknown instrument: {code}")


def is_eligible(profile: StrategyProfile | StrategyKind | str, code: str) -> bool:
    return get_profile(profile).requires_index == (code == COMPOSITE_INDEX)


def eligible_instruments(profile: StrategyProfile | StrategyKind | str) -> list[Instrument]:
    profile = get_profile(profile)
    return [inst for inst in INSTRUMENT_POOL if is_eligible(profile, inst.code)]


def resolve_instrument(profile: StrategyProfile | StrategyKind | str, current: Instrument) -> Instrument:
    """切换策略后保持互斥约束：不适用时换成第一个适用的标的。"""
    if is_eligible(profile, current.code):
        return current
    return eligible_instruments(profile)[0]
