from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import main as app_main
from listing.translator import initial_listing
from shared.config.schema import ParameterSet


def test_parse_args_defaults_to_backtest():
    args = app_main.parse_args([])
    assert args.task == "backtest"
    assert args.config == "config/sandbox.yml"


def test_parse_args_accepts_config_after_subcommand():
    args = app_main.parse_args(["backtest", "--config", "config/other.yml", "--strategy", "Grid"])
    assert args.config == "config/other.yml"
    assert args.strategy == "Grid"


def test_main_backtest_uses_sandbox_engine(monkeypatch):
    @dataclass
    class _Res:
        summary: dict[str, Any]
        artifacts: dict[str, Any] | None = None

    calls: list[dict[str, Any]] = []
    printed: list[Any] = []

    class _FakeEngine:
        def __init__(self, **kwargs):
            calls.append(kwargs)

        def run(self):
            return _Res(summary={"accepted": True}, artifacts={"result": "R"})

    monkeypatch.setattr(app_main, "SandboxEngine", _FakeEngine)
    monkeypatch.setattr(app_main, "print_result", lambda result, **_kw: printed.append(result))

    res = app_main.main(["backtest", "--strategy", "Grid", "--instrument", "603019.SH"])
    assert res == {"accepted": True}
    assert printed == ["R"]
    assert calls[0]["strategy"] == "Grid"
    assert calls[0]["instrument"] == "603019.SH"
    assert calls[0]["listing"] is None


def test_main_backtest_reports_refusal(monkeypatch):
    @dataclass
    class _Res:
        summary: dict[str, Any]
        artifacts: dict[str, Any] | None = None

    class _FakeEngine:
        def __init__(self, **_kwargs):
            pass

        def run(self):
            return _Res(summary={"accepted": False, "validation": {"reasons": ["boom"]}})

    monkeypatch.setattr(app_main, "SandboxEngine", _FakeEngine)
    res = app_main.main(["backtest"])
    assert res["accepted"] is False


def test_main_listing_prints_template_with_config_params():
    text = app_main.main(["listing", "--strategy", "SingleMA"])
    assert "('period', 10)" in text
    assert "# Initial Capital: 100000" in text


def test_main_check_listing_file(tmp_path):
    good = tmp_path / "good.py"
    good.write_text(initial_listing("DualMA", ParameterSet()).replace("('stop_loss', 5)", "('stop_loss', 9)"), encoding="utf-8")
    bad = tmp_path / "bad.py"
    bad.write_text(initial_listing("DualMA", ParameterSet()) + "\nimport os\n", encoding="utf-8")

    assert app_main.main(["check", str(good), "--strategy", "DualMA"]) is True
    assert app_main.main(["check", str(bad), "--strategy", "DualMA"]) is False
