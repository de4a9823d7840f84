import asyncio
from datetime import date

import pytest

from engine.cache import ResultCache
from listing.integrity import ANALYSIS_BEGIN
from session.console import ConsoleFeed, LogLevel
from session.context import SandboxSession
from shared.config.schema import ParameterSet, SandboxConfig


@pytest.fixture
def session() -> SandboxSession:
    return SandboxSession.from_config(SandboxConfig(instrument="603019.SH"))


def test_from_config_runs_baseline(session: SandboxSession):
    assert session.result is not None
    assert session.executed_params == session.params
    assert "('period_fast', 10)" in session.listing
    assert "# Initial Capital: 100000" in session.listing


def test_small_cap_forces_composite_index(session: SandboxSession):
    session.select_strategy("SmallCap")
    assert session.instrument.code == "CSI_300"
    assert session.profile.name == "SmallCap"
    assert session.validate().ok

    session.select_strategy("DualMA")
    assert session.instrument.code == "300539.SZ"


def test_ineligible_instrument_is_rejected(session: SandboxSession):
    assert session.select_instrument("CSI_300") is False
    assert session.instrument.code == "603019.SH"
    assert session.console.last().level is LogLevel.WARN

    assert session.select_instrument("601138.SH") is True
    assert session.instrument.code == "601138.SH"


def test_select_strategy_keeps_unrelated_params(session: SandboxSession):
    session.set_param("grid_step", 4.2)
    session.select_strategy("Grid")
    assert session.params.grid_step == 2.0  # 模板自带值
    session.set_param("t0_threshold", 1.2)
    session.select_strategy("DualMA")
    assert session.params.t0_threshold == 1.2


def test_slider_writes_back_to_listing(session: SandboxSession):
    session.set_param("stop_loss", 12)
    assert "('stop_loss', 12)" in session.listing
    assert session.params.stop_loss == 12

    # 超出滑杆范围时裁剪
    session.set_param("stop_loss", 99)
    assert session.params.stop_loss == 20
    assert "('stop_loss', 20)" in session.listing


def test_edit_listing_updates_params(session: SandboxSession):
    text = session.listing.replace("('take_profit', 15)", "('take_profit', 25)")
    params = session.edit_listing(text)
    assert params.take_profit == 25
    assert session.listing == text


def test_unchanged_run_reuses_existing_result(session: SandboxSession):
    before = session.result
    session.run_backtest()
    assert session.result is before
    assert "参数未变更" in session.console.last().message


def test_changed_run_updates_result(session: SandboxSession):
    before = session.result
    session.set_param("take_profit", 20)
    validation = session.run_backtest()
    assert validation.ok
    assert session.executed_params == session.params
    assert session.result != before
    assert session.console.last().level is LogLevel.SUCCESS


def test_refused_run_keeps_previous_result(session: SandboxSession):
    before = session.result
    session.update_params(session.params.model_copy(update={"short_period": 30.0, "long_period": 20.0}))
    validation = session.run_backtest()
    assert validation.refused
    assert session.result is before
    assert session.console.last().level is LogLevel.ERROR


def test_inverted_range_run_gives_empty_result(session: SandboxSession):
    session.update_params(
        session.params.model_copy(update={"start_date": date(2025, 6, 1), "end_date": date(2024, 6, 1)})
    )
    validation = session.run_backtest()
    assert validation.range_invalid
    assert session.result.trades == []
    assert session.result.series == []


def test_save_reports_validation(session: SandboxSession):
    assert session.save() is True
    session.update_params(session.params.model_copy(update={"short_period": 25.0}))
    assert session.save() is False


def test_session_uses_cache():
    cache = ResultCache()
    session = SandboxSession.from_config(SandboxConfig(), cache=cache)
    session.set_param("stop_loss", 8)
    session.run_backtest()
    session.set_param("stop_loss", 5)
    session.run_backtest()
    assert cache.hits == 1
    assert len(cache) == 2


def test_analyze_appends_commentary(session: SandboxSession):
    def provider(listing: str, params: ParameterSet) -> str:
        return f"Stop loss {params.stop_loss:g}% is tight."

    text = session.analyze(provider)
    assert text == "Stop loss 5% is tight."
    assert ANALYSIS_BEGIN in session.listing
    assert session.validate().ok


@pytest.mark.asyncio
async def test_deferred_run_commits_after_delay(session: SandboxSession):
    session.set_param("take_profit", 30)
    validation = await session.run_backtest_deferred(delay_secs=0)
    assert validation.ok
    assert session.executed_params == session.params


@pytest.mark.asyncio
async def test_cancelled_deferred_run_leaves_session_untouched(session: SandboxSession):
    before_result = session.result
    before_params = session.executed_params
    session.set_param("take_profit", 30)

    task = asyncio.create_task(session.run_backtest_deferred(delay_secs=10))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert session.result is before_result
    assert session.executed_params is before_params


def test_console_feed_levels():
    feed = ConsoleFeed()
    feed.info("a")
    feed.warn("b")
    feed.error("c")
    entry = feed.success("d")
    assert [e.level for e in feed.entries] == [LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR, LogLevel.SUCCESS]
    assert feed.last() is entry
    assert len(entry.time) == 8


def test_huge_capital_from_listing_runs_without_error(session: SandboxSession):
    text = session.listing.replace("# Initial Capital: 100000", "# Initial Capital: " + "9" * 400)
    params = session.edit_listing(text)
    assert params.initial_capital == int("9" * 400)

    validation = session.run_backtest()
    assert validation.ok
    assert session.executed_params == params
    assert session.result.series
