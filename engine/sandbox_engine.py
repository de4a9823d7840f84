"""沙盒回测引擎（SandboxEngine）。

目标是“一眼能看懂”：配置 → 运行前校验 → 账本 → 指标（取账本长度）→ 图表序列 → 产物。

错误分类（都不抛异常，以 ValidationResult 返回给调用方展示）：
1. 日期区间非法：产出空账本/空序列，并带 range_invalid 标记；
2. 参数顺序非法（双均线短周期 >= 长周期）：拒绝运行；
3. 代码结构被篡改：拒绝运行；
4. 标的与策略不匹配：拒绝运行。
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any

from engine.base_engine import BaseEngine, EngineResult
from engine.cache import ResultCache
from engine.calendar import DEFAULT_CALENDAR, TradingCalendar
from engine.ledger import generate_trades
from engine.metrics import summarize
from engine.series import build_series
from engine.signature import build_signature
from listing.integrity import is_structurally_valid
from listing.translator import from_listing
from market.instruments import get_instrument, is_eligible
from shared.config.config_loader import DEFAULT_CONFIG_PATH, load_config
from shared.config.schema import ParameterSet, SandboxConfig
from shared.models.models import SimulationResult, ValidationResult
from shared.utils.logging import setup_logger
from shared.utils.precision import clamp_float
from strategy.profiles import StrategyKind, StrategyProfile
from strategy.registry import get_profile


def validate_run(
    profile: StrategyProfile | StrategyKind | str,
    params: ParameterSet,
    listing: str | None = None,
    instrument_code: str | None = None,
) -> ValidationResult:
    """运行前校验，返回全部不通过的原因。"""
    profile = get_profile(profile)
    result = ValidationResult()

    if profile.kind is StrategyKind.DUAL_MA and params.short_period >= params.long_period:
        result.order_invalid = True
        result.reasons.append(
            f"短期均线({params.short_period:g}) 必须小于 长期均线({params.long_period:g})！"
        )
    if params.start_date > params.end_date:
        result.range_invalid = True
        result.reasons.append("开始时间不能晚于结束时间！")
    if listing is not None and not is_structurally_valid(profile, listing):
        result.listing_invalid = True
        result.reasons.append("策略代码结构被修改，只允许修改参数数值！")
    if instrument_code is not None and not is_eligible(profile, instrument_code):
        result.instrument_invalid = True
        result.reasons.append(f"标的 {instrument_code} 不适用于 {profile.name}！")
    return result


def simulate(
    profile: StrategyProfile | StrategyKind | str,
    instrument_code: str,
    params: ParameterSet,
    *,
    calendar: TradingCalendar = DEFAULT_CALENDAR,
) -> SimulationResult:
    """账本 → 指标 → 序列，三者由同一组输入显式串联。"""
    profile = get_profile(profile)
    trades = generate_trades(profile, instrument_code, params, calendar=calendar)
    metrics = summarize(profile, instrument_code, params, len(trades))
    series = build_series(params, trades, instrument_code, profile=profile, calendar=calendar)
    return SimulationResult(
        signature=build_signature(profile, instrument_code, params),
        trades=trades,
        metrics=metrics,
        series=series,
    )


class SandboxEngine(BaseEngine):
    """单次沙盒回测。

    Parameters
    ----------
    cfg_path:
        配置文件路径（cfg_obj 为空时读取）。
    cfg_obj:
        已解析的 SandboxConfig。
    strategy / instrument / params:
        覆盖配置中的对应项。
    listing:
        用户编辑过的代码文本；提供时先做完整性校验，再从中解析参数。
    cache:
        可选的签名缓存。
    artifacts_dir:
        提供时导出 trades.csv / equity.csv / metrics.json。
    """

    def __init__(
        self,
        *,
        cfg_path: str = DEFAULT_CONFIG_PATH,
        cfg_obj: SandboxConfig | None = None,
        strategy: str | None = None,
        instrument: str | None = None,
        params: ParameterSet | None = None,
        listing: str | None = None,
        cache: ResultCache | None = None,
        artifacts_dir: str | Path | None = None,
    ):
        self._cfg_path = cfg_path
        self._cfg_obj = cfg_obj
        self._strategy = strategy
        self._instrument = instrument
        self._params = params
        self._listing = listing
        self.cache = cache
        self._artifacts_dir = artifacts_dir

    def _load_cfg(self) -> SandboxConfig:
        if self._cfg_obj is None:
            self._cfg_obj = load_config(self._cfg_path)
        return self._cfg_obj

    def run(self) -> EngineResult:
        cfg = self._load_cfg()
        logger = setup_logger("sandbox", cfg.log_level)

        profile = get_profile(self._strategy or cfg.strategy)
        instrument = get_instrument(self._instrument or cfg.instrument)
        params = self._params or cfg.params
        if self._listing is not None:
            params = from_listing(profile, self._listing, params)

        validation = validate_run(profile, params, self._listing, instrument.code)
        summary: dict[str, Any] = {
            "strategy": profile.name,
            "instrument": instrument.code,
            "accepted": not validation.refused,
            "validation": asdict(validation),
        }
        if validation.refused:
            for reason in validation.reasons:
                logger.error("回测失败：%s", reason)
            return EngineResult(summary=summary)
        if validation.range_invalid:
            logger.warning("日期区间为空：%s > %s", params.start_date, params.end_date)

        result = self._simulate(profile, instrument.code, params)
        logger.info(
            "回测完成 %s / %s: trades=%d annual_return=%.2f%%",
            profile.name,
            instrument.code,
            len(result.trades),
            result.metrics.annual_return,
        )

        summary["signature"] = result.signature
        summary["metrics"] = asdict(result.metrics)
        summary["final_equity"] = result.series[-1].equity if result.series else clamp_float(params.initial_capital)
        artifacts: dict[str, Any] = {"result": result}
        if self._artifacts_dir is not None:
            from analysis.report import export_artifacts

            artifacts["files"] = export_artifacts(result, self._artifacts_dir)
        return EngineResult(summary=summary, artifacts=artifacts)

    def _simulate(self, profile: StrategyProfile, instrument_code: str, params: ParameterSet) -> SimulationResult:
        return self.cached(
            build_signature(profile, instrument_code, params),
            lambda: simulate(profile, instrument_code, params),
        )
