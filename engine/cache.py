"""按签名缓存模拟结果。

模拟是输入的纯函数，缓存只是优化：key = 签名，value = SimulationResult。
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable

from shared.models.models import SimulationResult


class ResultCache:
    """进程内 LRU 缓存。"""

    def __init__(self, max_entries: int = 64):
        self.max_entries = max(int(max_entries), 1)
        self._cache: OrderedDict[str, SimulationResult] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, signature: str) -> SimulationResult | None:
        result = self._cache.get(signature)
        if result is None:
            self.misses += 1
            return None
        self._cache.move_to_end(signature)
        self.hits += 1
        return result

    def set(self, signature: str, result: SimulationResult) -> None:
        self._cache[signature] = result
        self._cache.move_to_end(signature)
        # 清理最旧的缓存项
        while len(self._cache) > self.max_entries:
            self._cache.popitem(last=False)

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()


def cached_result(
    cache: ResultCache | None,
    signature: str,
    compute: Callable[[], SimulationResult],
) -> SimulationResult:
    """有缓存且命中时直接返回，否则计算并写入缓存。"""
    if cache is None:
        return compute()
    hit = cache.get(signature)
    if hit is not None:
        return hit
    result = compute()
    cache.set(signature, result)
    return result
