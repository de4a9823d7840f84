"""策略点评（外部文本生成服务）的接口约定。

核心只把服务返回的文本作为注释块追加到代码文本末尾，永远不会再解析它；
完整性校验会忽略整个注释块。
"""

from __future__ import annotations

from typing import Protocol

from listing.integrity import ANALYSIS_BEGIN, ANALYSIS_END
from shared.config.schema import ParameterSet

MISSING_KEY_MESSAGE = "Error: API Key is missing. Please configure the environment variable API_KEY."


class CommentaryProvider(Protocol):
    """给定代码文本与参数，返回自由文本点评。"""

    def __call__(self, listing: str, params: ParameterSet) -> str: ...


def build_prompt(listing: str, params: ParameterSet) -> str:
    return "\n".join(
        [
            "You are an expert Quantitative Trading Strategy Consultant.",
            "",
            "Please analyze the following Python Backtrader strategy code and configuration.",
            "",
            "Configuration:",
            f"- Fast MA Period: {params.short_period:g}",
            f"- Slow MA Period: {params.long_period:g}",
            f"- Stop Loss: {params.stop_loss:g}%",
            f"- Take Profit: {params.take_profit:g}%",
            "",
            "Code:",
            "```python",
            listing,
            "```",
            "",
            "Please provide:",
            "1. A brief explanation of the strategy logic.",
            "2. Potential risks with the current parameters.",
            "3. One specific suggestion to improve the code or logic.",
            "",
            "Keep the response concise (under 200 words) and format it as Markdown.",
        ]
    )


def append_commentary(listing: str, commentary: str) -> str:
    """把点评以注释块形式追加到文本末尾（每行加 `# ` 前缀）。"""
    body = [f"# {line}".rstrip() for line in commentary.strip().splitlines()] or ["#"]
    block = "\n".join([ANALYSIS_BEGIN, *body, ANALYSIS_END])
    return listing.rstrip("\n") + "\n\n" + block + "\n"
