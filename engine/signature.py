"""签名构建：把 (策略, 标的, 参数) 规范化为字符串，再哈希为 32 位 seed。"""

from __future__ import annotations

import json

from shared.config.schema import ParameterSet
from shared.utils.hashing import hash32
from strategy.profiles import StrategyKind, StrategyProfile


def _strategy_name(strategy: str | StrategyKind | StrategyProfile) -> str:
    if isinstance(strategy, StrategyProfile):
        return strategy.name
    if isinstance(strategy, StrategyKind):
        return strategy.value
    return str(strategy)


def canonical_params(params: ParameterSet) -> str:
    """按键排序的 JSON 编码（日期为 ISO 字符串）。"""
    return json.dumps(params.model_dump(mode="json"), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def build_signature(strategy: str | StrategyKind | StrategyProfile, instrument_code: str, params: ParameterSet) -> str:
    return f"{_strategy_name(strategy)}-{instrument_code}-{canonical_params(params)}"


def seed_for(strategy: str | StrategyKind | StrategyProfile, instrument_code: str, params: ParameterSet) -> int:
    return hash32(build_signature(strategy, instrument_code, params))
