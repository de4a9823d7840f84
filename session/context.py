"""会话上下文（SandboxSession）。

把 UI 的全局可变状态（当前策略、标的、参数、代码文本、上次回测结果）收拢到
一个显式对象里；核心计算函数本身都是无状态的纯函数。

数据流：
- 滑杆改参数 → `update_params` / `set_param` → 参数写回代码文本；
- 直接改代码 → `edit_listing` → 从文本解析回参数；
- 点击回测 → `run_backtest`：先校验（完整性/参数顺序/区间），再模拟。
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from analysis.commentary import CommentaryProvider, append_commentary
from engine.cache import ResultCache, cached_result
from engine.sandbox_engine import simulate, validate_run
from engine.signature import build_signature
from listing.translator import from_listing, initial_listing, to_listing
from market.instruments import Instrument, get_instrument, is_eligible, resolve_instrument
from session.console import ConsoleFeed
from shared.config.schema import ParameterSet, SandboxConfig
from shared.models.models import SimulationResult, ValidationResult
from strategy.profiles import StrategyKind, StrategyProfile
from strategy.registry import get_profile


@dataclass
class SandboxSession:
    profile: StrategyProfile
    instrument: Instrument
    params: ParameterSet
    listing: str
    executed_params: ParameterSet | None = None
    result: SimulationResult | None = None
    run_delay_secs: float = 0.8
    console: ConsoleFeed = field(default_factory=ConsoleFeed)
    cache: ResultCache | None = None

    @classmethod
    def from_config(cls, cfg: SandboxConfig, *, cache: ResultCache | None = None) -> "SandboxSession":
        """按配置建立会话，并跑一次基线模拟。"""
        profile = get_profile(cfg.strategy)
        instrument = resolve_instrument(profile, get_instrument(cfg.instrument))
        listing = to_listing(profile, cfg.params, initial_listing(profile, cfg.params))
        session = cls(
            profile=profile,
            instrument=instrument,
            params=cfg.params,
            listing=listing,
            run_delay_secs=cfg.run_delay_secs,
            cache=cache,
        )
        session._commit(profile, instrument, cfg.params)
        return session

    # ------------------------------------------------------------------
    # 模拟
    # ------------------------------------------------------------------
    def _simulate(self, profile: StrategyProfile, instrument: Instrument, params: ParameterSet) -> SimulationResult:
        return cached_result(
            self.cache,
            build_signature(profile, instrument.code, params),
            lambda: simulate(profile, instrument.code, params),
        )

    def _commit(self, profile: StrategyProfile, instrument: Instrument, params: ParameterSet) -> SimulationResult:
        self.executed_params = params
        self.result = self._simulate(profile, instrument, params)
        return self.result

    # ------------------------------------------------------------------
    # 模板 / 标的
    # ------------------------------------------------------------------
    def select_strategy(self, kind: StrategyKind | str) -> None:
        """切换策略模板：载入模板代码、读取模板默认参数、维持标的互斥约束。"""
        profile = get_profile(kind)
        listing = initial_listing(profile, self.params)
        params = from_listing(profile, listing, self.params)

        instrument = resolve_instrument(profile, self.instrument)
        if instrument != self.instrument:
            self.console.info(f"[数据] 标的自动切换: {instrument.name} ({instrument.code})")

        self.profile = profile
        self.listing = listing
        self.params = params
        self.instrument = instrument
        self._commit(profile, instrument, params)
        self.console.info(f"[系统] 切换策略模板: {profile.name}")

    def select_instrument(self, code: str) -> bool:
        """切换回测标的；与当前策略不匹配时拒绝。"""
        instrument = get_instrument(code)
        if not is_eligible(self.profile, instrument.code):
            self.console.warn(f"[数据] 标的 {instrument.name} 不适用于 {self.profile.display_name}")
            return False
        self.instrument = instrument
        self._commit(self.profile, instrument, self.params)
        self.console.info(f"[数据] 切换回测标的: {instrument.name} ({instrument.code})")
        return True

    # ------------------------------------------------------------------
    # 参数 <-> 代码
    # ------------------------------------------------------------------
    def update_params(self, params: ParameterSet) -> None:
        """滑杆路径：整体替换参数并写回代码文本。"""
        self.params = params
        self.listing = to_listing(self.profile, params, self.listing)

    def set_param(self, name: str, value: Any) -> ParameterSet:
        """单个滑杆变更；数值按当前模板的滑杆范围裁剪。"""
        spec = self.profile.slider(name)
        if spec is not None:
            value = spec.clamp(value)
        params = ParameterSet.model_validate({**self.params.model_dump(), name: value})
        self.update_params(params)
        return params

    def edit_listing(self, text: str) -> ParameterSet:
        """代码路径：保存文本并解析回参数（解析不到的字段保持原值）。"""
        self.listing = text
        params = from_listing(self.profile, text, self.params)
        if params != self.params:
            self.params = params
        return self.params

    # ------------------------------------------------------------------
    # 保存 / 回测
    # ------------------------------------------------------------------
    def validate(self) -> ValidationResult:
        return validate_run(self.profile, self.params, self.listing, self.instrument.code)

    def save(self) -> bool:
        validation = validate_run(self.profile, self.params)
        if not validation.ok:
            for reason in validation.reasons:
                self.console.error(f"[错误] 保存失败：{reason}")
            return False
        self.console.success(
            f"[系统] 参数已保存: {self.profile.name} / {self.instrument.name} (Funds: {self.params.initial_capital})"
        )
        return True

    def _prepare_run(self) -> tuple[ValidationResult, bool]:
        """返回 (校验结果, 是否需要重新模拟)。"""
        validation = self.validate()
        if validation.refused:
            for reason in validation.reasons:
                self.console.error(f"[错误] 回测失败：{reason}")
            return validation, False
        if validation.range_invalid:
            for reason in validation.reasons:
                self.console.error(f"[错误] 回测失败：{reason}")
            # 区间非法不是异常：产出空结果
            self._commit(self.profile, self.instrument, self.params)
            return validation, False
        if self.params == self.executed_params and self.result is not None and self.result.trades:
            self.console.info("[提示] 参数未变更，显示已有回测结果。")
            return validation, False
        self.console.warn(f"[系统] 正在回测 {self.instrument.name} (Capital: {self.params.initial_capital})...")
        return validation, True

    def run_backtest(self) -> ValidationResult:
        validation, proceed = self._prepare_run()
        if proceed:
            self._commit(self.profile, self.instrument, self.params)
            self.console.success("[完成] 回测结束，指标已更新。")
        return validation

    async def run_backtest_deferred(self, delay_secs: float | None = None) -> ValidationResult:
        """带展示延迟的回测；延迟期间被取消时会话保持原样。"""
        validation, proceed = self._prepare_run()
        if not proceed:
            return validation
        profile, instrument, params = self.profile, self.instrument, self.params
        delay = self.run_delay_secs if delay_secs is None else delay_secs
        await asyncio.sleep(max(delay, 0.0))
        self._commit(profile, instrument, params)
        self.console.success("[完成] 回测结束，指标已更新。")
        return validation

    # ------------------------------------------------------------------
    # 外部点评
    # ------------------------------------------------------------------
    def analyze(self, provider: CommentaryProvider) -> str:
        """调用点评服务，并把结果作为注释块追加到代码文本。"""
        commentary = provider(self.listing, self.params)
        self.listing = append_commentary(self.listing, commentary)
        self.console.info("[AI] 策略点评已追加到代码末尾")
        return commentary
