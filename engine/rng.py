"""确定性伪随机数。

同一 seed 永远得到同一输出，没有内部状态；用 sin 的小数部分打散相邻整数 seed。
"""

from __future__ import annotations

import math

DAY_STRIDE = 100


def pseudo_random(seed: int | float) -> float:
    """返回 [0, 1) 区间的伪随机数。"""
    x = math.sin(seed) * 10000
    r = x - math.floor(x)
    # 浮点舍入可能得到恰好 1.0
    return r if r < 1.0 else 0.0


def scaled(seed: int | float, lo: float, hi: float) -> float:
    """把 pseudo_random(seed) 线性映射到 [lo, hi]。"""
    return lo + pseudo_random(seed) * (hi - lo)


class SeedStream:
    """围绕一个基础 seed 的取数器。

    每个取值点由 `seed + day_index * DAY_STRIDE + offset` 唯一确定，
    不同 offset 对应同一天内互不相关的抽样。
    """

    def __init__(self, seed: int):
        self.seed = int(seed)

    def draw(self, offset: int = 0) -> float:
        return pseudo_random(abs(self.seed + offset))

    def scaled(self, offset: int, lo: float, hi: float) -> float:
        return lo + self.draw(offset) * (hi - lo)

    def daily(self, day_index: int, offset: int = 0) -> float:
        return self.draw(day_index * DAY_STRIDE + offset)
