"""字符串哈希（签名 -> 32 位种子）。

要求：跨平台确定性，只用定宽整数运算，不依赖 locale/浮点。
"""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def utf16_units(text: str) -> list[int]:
    """按 UTF-16 码元拆分（BMP 以外的字符拆成代理对）。"""
    raw = text.encode("utf-16-le")
    return [raw[i] | (raw[i + 1] << 8) for i in range(0, len(raw), 2)]


def hash32(text: str) -> int:
    """多项式滚动哈希 `h = h*31 + unit`，带符号 32 位回绕。"""
    h = 0
    for unit in utf16_units(text):
        h = (h * 31 + unit) & _MASK32
    return _to_int32(h)
