"""执行引擎基类（模板模式）。

目标：
- 把“运行前校验/编排”与“账本/指标/序列生成”解耦；
- 所有引擎统一以 `run() -> EngineResult` 对外提供结果；
- 模拟是输入的纯函数，子类可通过 `cached` 按签名复用结果。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from engine.cache import ResultCache, cached_result
from shared.models.models import SimulationResult


@dataclass(frozen=True)
class EngineResult:
    """引擎运行结果（统一出口）。

    summary 至少包含 `accepted`；被拒绝时 artifacts 为 None。
    """

    summary: dict[str, Any]
    artifacts: dict[str, Any] | None = None

    @property
    def accepted(self) -> bool:
        return bool(self.summary.get("accepted", False))


class BaseEngine(ABC):
    """引擎抽象基类。"""

    cache: ResultCache | None = None

    def cached(self, signature: str, compute: Callable[[], SimulationResult]) -> SimulationResult:
        return cached_result(self.cache, signature, compute)

    @abstractmethod
    def run(self) -> EngineResult:
        raise NotImplementedError
