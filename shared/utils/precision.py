"""精度工具（用于价格/盈亏的展示稳定，以及参数值写回代码文本）。"""

from __future__ import annotations

import math
import sys
from decimal import Decimal


def snap_to_decimals(value: float, decimals: int) -> float:
    """把 float “钉死”到指定小数位，避免 repr 出现 0.30000000000004 这类噪声。"""
    try:
        d = int(decimals)
    except (TypeError, ValueError):
        return float(value)
    if d < 0:
        return float(value)
    return float(f"{float(value):.{d}f}")


def round_cents(value: float) -> float:
    return snap_to_decimals(value, 2)


def format_decimal(value: float) -> str:
    """格式化为定点小数字面量：整数值不带小数点，其余取最短往返表示，不用科学计数法。

    >>> format_decimal(10.0), format_decimal(1.5), format_decimal(1e-05)
    ('10', '1.5', '0.00001')
    """
    v = float(value)
    if not math.isfinite(v):
        return str(v)
    if v.is_integer():
        return str(int(v))
    text = format(Decimal(repr(v)), "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


def clamp_float(value: float | int) -> float:
    """转为 float；超出 float 表示范围的整数钳制到 ±sys.float_info.max。"""
    try:
        return float(value)
    except OverflowError:
        return sys.float_info.max if value > 0 else -sys.float_info.max
