"""策略注册表：字符串 -> StrategyProfile。

约定：engine/session 只通过注册表按名称取画像，不直接分支判断策略类型。
"""

from __future__ import annotations

from strategy.profiles import (
    DUAL_MA,
    GRID,
    LIMIT_UP,
    SINGLE_MA,
    SMALL_CAP,
    T0,
    StrategyKind,
    StrategyProfile,
)

_REGISTRY: dict[str, StrategyProfile] = {}


def register_profile(profile: StrategyProfile) -> None:
    _REGISTRY[profile.name] = profile


def get_profile(name: str | StrategyKind | StrategyProfile) -> StrategyProfile:
    if isinstance(name, StrategyProfile):
        return name
    key = name.value if isinstance(name, StrategyKind) else str(name)
    if key not in _REGISTRY:
        raise ValueError(f"Unknown strategy: {key}")
    return _REGISTRY[key]


def list_profiles() -> list[StrategyProfile]:
    return list(_REGISTRY.values())


# 默认注册（顺序即模板库展示顺序）
for _profile in (DUAL_MA, SINGLE_MA, SMALL_CAP, GRID, T0, LIMIT_UP):
    register_profile(_profile)
