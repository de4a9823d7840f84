"""配置 Schema 校验。

目标：
- 在启动阶段尽早失败，避免 typo 在回测中被默默忽略；
- 对顶层与 params 块做严格的键校验，并给出拼写建议；
- 类型校验交给 pydantic（`SandboxConfig`）。
"""

from __future__ import annotations

import difflib
from datetime import date, datetime
from typing import Any, Iterable

from shared.config.schema import ParameterSet, SandboxConfig


def _suggest_key(key: str, allowed: Iterable[str]) -> str | None:
    matches = difflib.get_close_matches(key, list(allowed), n=1, cutoff=0.75)
    return matches[0] if matches else None


def _ensure_allowed_keys(block: dict[str, Any], *, allowed: set[str], ctx: str) -> None:
    unknown = [k for k in block.keys() if k not in allowed]
    if not unknown:
        return
    parts = []
    for k in sorted(unknown):
        suggestion = _suggest_key(k, allowed)
        if suggestion:
            parts.append(f"{k} (did you mean '{suggestion}'?)")
        else:
            parts.append(k)
    raise ValueError(f"{ctx} contains unknown keys: {', '.join(parts)}")


def _expect_dict(val: Any, *, ctx: str) -> dict[str, Any]:
    if not isinstance(val, dict):
        raise ValueError(f"{ctx} must be a dict")
    return val


def _expect_str(val: Any, *, ctx: str) -> str:
    if not isinstance(val, str) or not val.strip():
        raise ValueError(f"{ctx} must be a non-empty string")
    return val


def _expect_number(val: Any, *, ctx: str) -> float:
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return float(val)
    raise ValueError(f"{ctx} must be a number")


def _expect_date_like(val: Any, *, ctx: str) -> Any:
    # YAML 可能把未加引号的日期解析为 date；这里两者都允许。
    if isinstance(val, (str, datetime, date)):
        return val
    raise ValueError(f"{ctx} must be an ISO date string or date")


def validate_raw_config(cfg: dict[str, Any]) -> None:
    """校验 raw config dict（来自 YAML + env 展开后）。"""
    if not isinstance(cfg, dict):
        raise ValueError("Config root must be a dict")

    _ensure_allowed_keys(cfg, allowed=set(SandboxConfig.model_fields), ctx="config")

    if "strategy" in cfg:
        _expect_str(cfg["strategy"], ctx="config.strategy")
    if "instrument" in cfg:
        _expect_str(cfg["instrument"], ctx="config.instrument")
    if "run_delay_secs" in cfg and cfg["run_delay_secs"] is not None:
        _expect_number(cfg["run_delay_secs"], ctx="config.run_delay_secs")

    params = cfg.get("params")
    if params is not None:
        _validate_params(_expect_dict(params, ctx="config.params"))


def _validate_params(params: dict[str, Any]) -> None:
    _ensure_allowed_keys(params, allowed=set(ParameterSet.model_fields), ctx="config.params")
    for key, val in params.items():
        if key in {"start_date", "end_date"}:
            _expect_date_like(val, ctx=f"config.params.{key}")
        else:
            _expect_number(val, ctx=f"config.params.{key}")
