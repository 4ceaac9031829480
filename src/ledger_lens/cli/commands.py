"""CLI command definitions for the CSV financial analyst."""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from ledger_lens.config import Config
from ledger_lens.domain.models.analysis import FinancialAnalysis, StatementItem
from ledger_lens.errors import ConfigurationError, LedgerLensError
from ledger_lens.services.analysis_client import AnalysisClient
from ledger_lens.settings.loader import load_settings
from ledger_lens.utils.logging import configure_logging

console = Console()
app = typer.Typer(help="Turn CSV transaction exports into AI-written financial reports.")

T = TypeVar("T")


@dataclass
class AppContext:
    """Holds reusable process-wide objects for CLI commands."""

    config: Config


def _init_context(
    debug_override: Optional[bool] = None,
    *,
    model: Optional[str] = None,
    currency: Optional[str] = None,
) -> AppContext:
    """Create a context with configuration and logging wired up."""
    try:
        config = load_settings(debug_override=debug_override, model=model, currency_code=currency)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    configure_logging(debug=config.debug)
    return AppContext(config=config)


def _build_client(config: Config) -> AnalysisClient:
    return AnalysisClient(config)


def _read_csv(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[red]Cannot read {path}: {exc.strerror or exc}[/red]")
        raise typer.Exit(code=1)


def _run(ctx: typer.Context, operation: Callable[[AnalysisClient], Awaitable[T]]) -> T:
    """Build a client, run one operation on it and translate errors into exit codes."""
    if ctx.obj is None:
        raise typer.Exit(code=1)
    context: AppContext = ctx.obj

    async def _invoke() -> T:
        async with _build_client(context.config) as client:
            return await operation(client)

    try:
        return asyncio.run(_invoke())
    except ConfigurationError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=2)
    except LedgerLensError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)
    except ValueError as exc:
        console.print(f"Invalid input: {exc}", style="red", markup=False)
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: Optional[bool] = typer.Option(
        None,
        "--debug/--no-debug",
        help="Temporarily toggle verbose logging without touching environment variables.",
    ),
    model: Optional[str] = typer.Option(None, "--model", help="Override GEMINI_MODEL for this run."),
    currency: Optional[str] = typer.Option(
        None, "--currency", help="Three-letter currency code used in formatted amounts."
    ),
) -> None:
    """Attach the lazily constructed application context to Typer."""
    ctx.obj = _init_context(debug_override=debug, model=model, currency=currency)


@app.command()
def analyze(
    ctx: typer.Context,
    csv_path: Path = typer.Argument(..., help="CSV export of financial transactions."),
    outlet: Optional[str] = typer.Option(None, "--outlet", help="Restrict the report to one outlet."),
    json_path: Optional[Path] = typer.Option(
        None, "--json", help="Also write the full report as camelCase JSON to this path."
    ),
) -> None:
    """Generate statements, ratios, risks and commentary from a CSV file."""
    csv_data = _read_csv(csv_path)
    scope = f"outlet {outlet}" if outlet else "all outlets"
    console.rule(f"Analyzing {csv_path.name} ({scope})")

    with console.status("[bold cyan]Waiting for the model..."):
        analysis = _run(ctx, lambda client: client.analyze_financial_data(csv_data, outlet=outlet))

    if analysis.checked:
        _print_analysis(analysis)
    else:
        console.print(
            "[yellow]The report did not pass validation; showing the raw body.[/yellow]"
        )
        console.print_json(data=analysis.to_wire())

    if json_path is not None:
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(
            json.dumps(analysis.to_wire(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        console.print(f"Report saved to {json_path}")


@app.command()
def forecast(
    ctx: typer.Context,
    csv_path: Path = typer.Argument(..., help="CSV export of financial transactions."),
    revenue_growth: float = typer.Option(0.0, "--revenue-growth", help="Revenue growth in percent, e.g. 5 or -2.5."),
    expense_growth: float = typer.Option(0.0, "--expense-growth", help="Expense growth in percent."),
) -> None:
    """Project the next period under revenue and expense growth assumptions."""
    csv_data = _read_csv(csv_path)
    text = _run(
        ctx,
        lambda client: client.get_updated_forecast(csv_data, revenue_growth, expense_growth),
    )
    console.print(text, markup=False)


@app.command()
def outlets(
    ctx: typer.Context,
    csv_path: Path = typer.Argument(..., help="CSV export of financial transactions."),
) -> None:
    """List the outlets, branches or stores found in the data."""
    csv_data = _read_csv(csv_path)
    names: List[str] = _run(ctx, lambda client: client.get_outlets(csv_data))
    if not names:
        console.print("[yellow]No outlet column detected; reports will be consolidated.[/yellow]")
        return
    for name in names:
        console.print(f"- {name}", markup=False)


@app.command()
def ask(
    ctx: typer.Context,
    csv_path: Path = typer.Argument(..., help="CSV export of financial transactions."),
    question: str = typer.Argument(..., help="Question to answer from the data."),
) -> None:
    """Answer a natural-language question using only the CSV contents."""
    csv_data = _read_csv(csv_path)
    answer = _run(ctx, lambda client: client.query_data(csv_data, question))
    console.print(answer, markup=False)


def _statement_table(title: str, items: List[StatementItem]) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("Item")
    table.add_column("Value", justify="right")
    for line in items:
        style = "bold" if line.is_bold else None
        table.add_row(line.item, line.value, style=style)
    return table


def _print_analysis(analysis: FinancialAnalysis) -> None:
    """Pretty-print the report sections operators read first."""
    cards = Table(title="Summary", show_header=True, header_style="bold magenta")
    cards.add_column("Metric")
    cards.add_column("Value", justify="right")
    cards.add_column("Change", justify="right")
    for card in analysis.summary_cards:
        colour = "green" if card.change_type == "positive" else "red"
        cards.add_row(card.title, card.value, f"[{colour}]{card.change}[/{colour}]")
    console.print(cards)

    console.print(_statement_table("Income Statement", analysis.income_statement))
    console.print(_statement_table("Balance Sheet", analysis.balance_sheet))
    console.print(_statement_table("Cash Flow Statement", analysis.cash_flow_statement))
    console.print(analysis.pnl_interpretation, markup=False)

    ratios = Table(title="Key Ratios", show_header=True, header_style="bold magenta")
    ratios.add_column("Category", style="cyan")
    ratios.add_column("Ratio")
    ratios.add_column("Value", justify="right")
    ratios.add_column("Insight")
    for group in analysis.ratios:
        for ratio in group.ratios:
            ratios.add_row(group.category, ratio.name, ratio.value, ratio.insight)
    console.print(ratios)

    console.rule("Executive Summary")
    for point in analysis.executive_summary:
        console.print(f"- {point}", markup=False)

    risks = Table(title="Key Risks", show_header=True, header_style="bold magenta")
    risks.add_column("Risk")
    risks.add_column("Recommendation")
    for risk in analysis.key_risks:
        risks.add_row(risk.risk, risk.recommendation)
    console.print(risks)

    breakeven = analysis.analyst_view.breakeven_analysis
    console.print(f"Breakeven revenue: [bold]{breakeven.breakeven_revenue}[/bold]")
    console.print(f"Forecast: {analysis.analyst_view.forecast}")
