from datetime import date

from rich.console import Console

from analysis.commentary import MISSING_KEY_MESSAGE, append_commentary, build_prompt
from analysis.report import metrics_table, print_result, trades_table
from engine.sandbox_engine import simulate
from listing.integrity import ANALYSIS_BEGIN, ANALYSIS_END
from shared.config.schema import ParameterSet
from shared.models.models import DEFAULT_METRICS


def test_print_result_renders_tables():
    params = ParameterSet(start_date=date(2024, 1, 1), end_date=date(2024, 3, 31))
    result = simulate("T0", "300539.SZ", params)
    console = Console(record=True, width=120)
    print_result(result, console=console, trade_limit=5)
    text = console.export_text()
    assert "年化收益" in text
    assert "期末权益" in text


def test_trades_table_limit():
    params = ParameterSet(start_date=date(2024, 1, 1), end_date=date(2024, 6, 30))
    result = simulate("T0", "300539.SZ", params)
    assert trades_table(result.trades, limit=3).row_count == min(3, len(result.trades))
    assert trades_table(result.trades, limit=None).row_count == len(result.trades)
    assert metrics_table(DEFAULT_METRICS).row_count == 6


def test_prompt_and_commentary_block():
    params = ParameterSet(short_period=7, stop_loss=4)
    prompt = build_prompt("code here", params)
    assert "Fast MA Period: 7" in prompt
    assert "Stop Loss: 4%" in prompt
    assert "code here" in prompt

    listing = append_commentary("x = 1\n", MISSING_KEY_MESSAGE)
    lines = listing.splitlines()
    assert lines[0] == "x = 1"
    assert lines[2] == ANALYSIS_BEGIN
    assert lines[3] == "# " + MISSING_KEY_MESSAGE
    assert lines[-1] == ANALYSIS_END
