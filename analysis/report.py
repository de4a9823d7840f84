"""回测结果输出：终端表格（rich）与文件产物（trades.csv / equity.csv / metrics.json）。"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

import pandas as pd
from rich import box
from rich.console import Console
from rich.table import Table

from engine.series import series_to_frame
from shared.models.models import Metrics, SimulationResult, Trade

_METRIC_LABELS = {
    "annualReturn": "年化收益",
    "benchmarkReturn": "基准收益",
    "sharpeRatio": "夏普比率",
    "maxDrawdown": "最大回撤",
    "winRate": "胜率",
    "tradeCount": "交易次数",
}


def metrics_table(metrics: Metrics, *, title: str = "📊 回测指标") -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("指标", style="cyan")
    table.add_column("数值", justify="right", style="bold")
    for key, value in metrics.as_display().items():
        table.add_row(_METRIC_LABELS.get(key, key), value)
    return table


def trades_table(trades: list[Trade], *, limit: int | None = 20) -> Table:
    """交易明细；limit 为 None 时展示全部。"""
    shown = trades if limit is None else trades[-limit:]
    table = Table(title=f"交易明细（{len(shown)}/{len(trades)}）", box=box.ROUNDED)
    table.add_column("日期")
    table.add_column("方向")
    table.add_column("价格", justify="right")
    table.add_column("盈亏", justify="right")
    table.add_column("原因")
    for t in shown:
        direction = "[red]买入[/red]" if t.direction == "Buy" else "[green]卖出[/green]"
        if t.pl is None:
            pl = ""
        else:
            color = "red" if t.pl >= 0 else "green"
            pl = f"[{color}]{t.pl:+.2f}[/{color}]"
        table.add_row(t.date, direction, f"{t.price:.2f}", pl, t.reason or "")
    return table


def print_result(result: SimulationResult, *, console: Console | None = None, trade_limit: int | None = 20) -> None:
    console = console or Console()
    console.print(metrics_table(result.metrics))
    console.print(trades_table(result.trades, limit=trade_limit))
    if result.series:
        last = result.series[-1]
        console.print(f"[bold]期末权益[/bold] {last.equity:,.2f}  ({last.date})")


def export_artifacts(result: SimulationResult, out_dir: str | Path) -> dict[str, str]:
    """写出产物文件，返回 {名称: 路径}。"""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    trades_path = out / "trades.csv"
    trades_df = pd.DataFrame(
        [asdict(t) for t in result.trades],
        columns=["date", "direction", "price", "pl", "reason"],
    )
    trades_df.to_csv(trades_path, index=False)

    equity_path = out / "equity.csv"
    series_to_frame(result.series).to_csv(equity_path, index=False)

    metrics_path = out / "metrics.json"
    payload = {"signature": result.signature, "metrics": asdict(result.metrics)}
    metrics_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    return {"trades_csv": str(trades_path), "equity_csv": str(equity_path), "metrics_json": str(metrics_path)}
