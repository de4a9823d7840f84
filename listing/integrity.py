"""代码文本完整性校验。

允许用户任意修改数字，但拒绝结构性修改（改名、调序、增删行、改逻辑）。
做法：把用户文本与模板各自规约为“骨架”再逐字比较：
- 去掉资金注释行与末尾追加的分析注释块；
- 所有数字字面量替换为占位符；
- 去掉全部空白。

分析注释块只有位于文本末尾、且标记之间全部是 `#` 注释行时才会被忽略；
出现在正文中间或夹带代码行的标记按普通文本参与比较。
"""

from __future__ import annotations

import re

from strategy.profiles import StrategyKind, StrategyProfile
from strategy.registry import get_profile

ANALYSIS_BEGIN = "# ==== AI Analysis ===="
ANALYSIS_END = "# ==== End Analysis ===="
NUMBER_PLACEHOLDER = "<NUM>"

_CAPITAL_LINE_RE = re.compile(r"^[ \t]*# Initial Capital:[^\n]*$", re.MULTILINE)
_TRAILING_BLOCK_RE = re.compile(
    r"^[ \t]*" + re.escape(ANALYSIS_BEGIN) + r"[ \t]*\n"
    r"(?:[ \t]*#[^\n]*\n)*?"
    r"[ \t]*" + re.escape(ANALYSIS_END) + r"\s*\Z",
    re.MULTILINE,
)
# 标识符内部的数字（如 speed_1m、ma5）不算字面量
_NUMBER_RE = re.compile(r"(?<![A-Za-z_\d.])\d+(?:\.\d+)?")
_WHITESPACE_RE = re.compile(r"\s+")


def split_commentary(text: str) -> tuple[str, str]:
    """拆出末尾追加的点评注释块（可连续多个）：返回 (正文, 注释块)。"""
    body = text
    while True:
        match = _TRAILING_BLOCK_RE.search(body)
        if match is None:
            break
        body = body[: match.start()]
    return body, text[len(body):]


def skeleton(text: str) -> str:
    text, _ = split_commentary(text)
    text = _CAPITAL_LINE_RE.sub("", text)
    text = _NUMBER_RE.sub(NUMBER_PLACEHOLDER, text)
    return _WHITESPACE_RE.sub("", text)


def is_structurally_valid(profile: StrategyProfile | StrategyKind | str, listing: str) -> bool:
    """用户文本与模板骨架一致时为 True。"""
    profile = get_profile(profile)
    return skeleton(listing) == skeleton(profile.template)
