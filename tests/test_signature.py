import json

from engine.signature import build_signature, canonical_params, seed_for
from shared.config.schema import ParameterSet
from strategy.profiles import StrategyKind
from strategy.registry import get_profile


def test_canonical_params_sorted_keys():
    payload = json.loads(canonical_params(ParameterSet()))
    assert list(payload) == sorted(payload)
    assert payload["start_date"] == "2024-01-01"


def test_signature_accepts_name_kind_or_profile():
    params = ParameterSet()
    by_name = build_signature("DualMA", "300539.SZ", params)
    assert by_name.startswith("DualMA-300539.SZ-{")
    assert build_signature(StrategyKind.DUAL_MA, "300539.SZ", params) == by_name
    assert build_signature(get_profile("DualMA"), "300539.SZ", params) == by_name


def test_seed_changes_with_any_input():
    params = ParameterSet()
    base = seed_for("DualMA", "300539.SZ", params)
    assert base == seed_for("DualMA", "300539.SZ", ParameterSet())
    assert base != seed_for("Grid", "300539.SZ", params)
    assert base != seed_for("DualMA", "603019.SH", params)
    assert base != seed_for("DualMA", "300539.SZ", params.model_copy(update={"stop_loss": 6.0}))
    # 与当前策略无关的字段同样参与签名
    assert base != seed_for("DualMA", "300539.SZ", params.model_copy(update={"grid_step": 2.5}))
