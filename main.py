"""蜂鸟量化 沙盒统一命令行入口。

该模块提供单一入口 `main.py`，通过子命令驱动不同任务：

- `backtest`：按配置（可被命令行覆盖）跑一次确定性模拟回测，输出指标与交易明细。
- `listing`：打印某个策略模板在当前参数下的代码文本。
- `check`：校验一份用户编辑过的代码文本是否只改了数字。
- `test`：运行 pytest。
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console

from analysis.report import print_result
from engine.sandbox_engine import SandboxEngine
from listing.integrity import is_structurally_valid
from listing.translator import initial_listing, to_listing
from shared.config.config_loader import DEFAULT_CONFIG_PATH, load_config
from strategy.registry import get_profile

console = Console()


@dataclass
class CliArgs:
    """定义命令行参数结构。

    config: 配置文件路径
    task: 要运行的任务类型 (backtest/listing/check/test)
    """
    config: str
    task: str
    strategy: str | None = None
    instrument: str | None = None
    listing: str | None = None   # 代码文本文件路径
    output_dir: str | None = None
    all_trades: bool = False


def build_parser() -> argparse.ArgumentParser:
    """构建 CLI 参数解析器。"""
    parser = argparse.ArgumentParser(prog="hummingbird", description="蜂鸟量化 策略沙盒")

    def _add_config_arg(p: argparse.ArgumentParser, *, default: Any) -> None:
        p.add_argument(
            "--config",
            default=default,
            help=f"配置文件路径 (默认: {DEFAULT_CONFIG_PATH})",
        )

    # 允许 `python main.py --config ... backtest`（全局）与 `python main.py backtest --config ...`（子命令）
    _add_config_arg(parser, default=DEFAULT_CONFIG_PATH)

    sub = parser.add_subparsers(dest="task")

    p_backtest = sub.add_parser("backtest", help="单次模拟回测")
    _add_config_arg(p_backtest, default=argparse.SUPPRESS)
    p_backtest.add_argument("--strategy", type=str, default=None, help="策略模板 (DualMA/SingleMA/SmallCap/Grid/T0/LimitUp)")
    p_backtest.add_argument("--instrument", type=str, default=None, help="标的代码")
    p_backtest.add_argument("--listing", type=str, default=None, help="用户编辑过的代码文本文件")
    p_backtest.add_argument("--output-dir", type=str, default=None, help="导出 trades/equity/metrics 的目录")
    p_backtest.add_argument("--all-trades", action="store_true", help="展示全部交易明细")

    p_listing = sub.add_parser("listing", help="打印策略代码文本")
    _add_config_arg(p_listing, default=argparse.SUPPRESS)
    p_listing.add_argument("--strategy", type=str, default=None)

    p_check = sub.add_parser("check", help="校验代码文本完整性")
    _add_config_arg(p_check, default=argparse.SUPPRESS)
    p_check.add_argument("listing", type=str, help="代码文本文件")
    p_check.add_argument("--strategy", type=str, default=None)

    sub.add_parser("test", help="运行 pytest")

    return parser


def parse_args(argv: list[str] | None = None) -> CliArgs:
    parser = build_parser()
    ns = parser.parse_args(argv)
    return CliArgs(
        config=str(getattr(ns, "config", DEFAULT_CONFIG_PATH)),
        task=ns.task or "backtest",
        strategy=getattr(ns, "strategy", None),
        instrument=getattr(ns, "instrument", None),
        listing=getattr(ns, "listing", None),
        output_dir=getattr(ns, "output_dir", None),
        all_trades=bool(getattr(ns, "all_trades", False)),
    )


def _read_text(path: str) -> str:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Listing file not found: {p}")
    return p.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> Any:
    """程序主入口，返回对应子命令的结果（通常为 summary dict）。"""
    args = parse_args(argv)

    if args.task == "backtest":
        cfg = load_config(args.config)
        result = SandboxEngine(
            cfg_obj=cfg,
            strategy=args.strategy,
            instrument=args.instrument,
            listing=_read_text(args.listing) if args.listing else None,
            artifacts_dir=args.output_dir or cfg.output_dir,
        ).run()
        if not result.summary["accepted"]:
            for reason in result.summary["validation"]["reasons"]:
                console.print(f"[red]回测失败：{reason}[/red]")
            return result.summary
        print_result(result.artifacts["result"], console=console, trade_limit=None if args.all_trades else 20)
        return result.summary

    if args.task == "listing":
        cfg = load_config(args.config)
        profile = get_profile(args.strategy or cfg.strategy)
        text = to_listing(profile, cfg.params, initial_listing(profile, cfg.params))
        console.print(text, markup=False, highlight=False)
        return text

    if args.task == "check":
        cfg = load_config(args.config)
        profile = get_profile(args.strategy or cfg.strategy)
        ok = is_structurally_valid(profile, _read_text(args.listing))
        if ok:
            console.print("[green]代码结构校验通过[/green]")
        else:
            console.print("[red]代码结构被修改，只允许修改参数数值！[/red]")
        return ok

    if args.task == "test":
        import pytest

        return pytest.main(["-q"])

    raise ValueError(f"Unknown task: {args.task}")


if __name__ == "__main__":
    main()
