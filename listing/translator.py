"""参数 <-> 代码文本 双向同步。

代码文本里的参数以 `('token', 数字)` 的形式出现，每个策略画像声明一张
`字段 -> token` 表；另有一行 `# Initial Capital: N` 注释独立承载初始资金。

- `to_listing`：把参数值写回既有文本（未匹配的 token 原样保留）；
- `from_listing`：从文本解析回参数，只覆盖表内字段与资金，其余字段保持原值；
  找不到 token 或数值不合法时该字段保持不变。

末尾追加的点评注释块不参与读写。
"""

from __future__ import annotations

import math
import re

from listing.integrity import split_commentary
from shared.config.schema import ParameterSet
from shared.utils.precision import format_decimal
from strategy.profiles import StrategyKind, StrategyProfile
from strategy.registry import get_profile

NUMBER_PATTERN = r"-?\d+(?:\.\d+)?"
# 资金必须是独占行尾的整数；`150000.75` 之类整体视为无法解析
CAPITAL_COMMENT_RE = re.compile(r"# Initial Capital: (\d+)[ \t]*$", re.MULTILINE)
_CAPITAL_ANY_RE = re.compile(r"# Initial Capital:[^\n]*")
_HEADER_MARKER = "strategy.py"


def _token_re(token: str) -> re.Pattern[str]:
    return re.compile(r"\('" + re.escape(token) + r"',\s*(" + NUMBER_PATTERN + r")\s*\)")


def capital_comment(capital: int) -> str:
    return f"# Initial Capital: {int(capital)}"


def write_capital(listing: str, capital: int) -> str:
    """更新资金注释；不存在时插入到 strategy.py 标题行之后（无标题则置顶）。"""
    comment = capital_comment(capital)
    if _CAPITAL_ANY_RE.search(listing):
        return _CAPITAL_ANY_RE.sub(comment, listing, count=1)
    lines = listing.split("\n")
    if lines and _HEADER_MARKER in lines[0]:
        lines.insert(1, "\n" + comment)
        return "\n".join(lines)
    return comment + "\n" + listing


def read_capital(listing: str) -> int | None:
    match = CAPITAL_COMMENT_RE.search(listing)
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # 超过整数字符串转换上限
        return None


def read_token(listing: str, token: str) -> float | None:
    match = _token_re(token).search(listing)
    if match is None:
        return None
    value = float(match.group(1))
    return value if math.isfinite(value) else None


def to_listing(
    profile: StrategyProfile | StrategyKind | str,
    params: ParameterSet,
    prior_listing: str,
) -> str:
    """把当前参数写入已有代码文本。"""
    profile = get_profile(profile)
    listing, commentary = split_commentary(prior_listing)
    for field_name, token in profile.tokens.items():
        replacement = f"('{token}', {format_decimal(getattr(params, field_name))})"
        listing = _token_re(token).sub(lambda _m: replacement, listing)
    return write_capital(listing, params.initial_capital) + commentary


def from_listing(
    profile: StrategyProfile | StrategyKind | str,
    listing: str,
    prior_params: ParameterSet,
) -> ParameterSet:
    """从代码文本解析参数，返回新的 ParameterSet（整体替换）。"""
    profile = get_profile(profile)
    listing, _ = split_commentary(listing)
    updates: dict[str, float | int] = {}
    for field_name, token in profile.tokens.items():
        value = read_token(listing, token)
        if value is not None:
            updates[field_name] = value
    capital = read_capital(listing)
    if capital is not None:
        updates["initial_capital"] = capital
    if not updates:
        return prior_params
    return ParameterSet.model_validate({**prior_params.model_dump(), **updates})


def initial_listing(profile: StrategyProfile | StrategyKind | str, params: ParameterSet) -> str:
    """模板文本 + 资金注释（切换模板时使用，参数取模板自带的默认值）。"""
    profile = get_profile(profile)
    return write_capital(profile.template, params.initial_capital)

