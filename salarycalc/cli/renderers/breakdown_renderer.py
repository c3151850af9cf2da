"""Rich renderer for paycheck breakdowns.

Transforms a Breakdown into formatted Rich tables.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from salarycalc.sdk.schemas import Breakdown, CalculationResponse, Deductions, TaxBreakdownItem, Taxes


def render_breakdown(
    console: Console,
    breakdown: Breakdown,
    response: Optional[CalculationResponse] = None,
) -> None:
    """Render a breakdown as Rich tables.

    Args:
        console: Rich Console instance
        breakdown: Classified breakdown
        response: Originating service response, for the footer (optional)
    """
    _render_summary(console, breakdown)

    table = Table(title="Your Paycheck Breakdown", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=30)
    table.add_column("Amount", justify="right", min_width=14)

    gross = breakdown.gross_pay
    table.add_row("[bold]GROSS PAY[/bold]", "")
    table.add_row("  Annual Salary", _fmt(gross.annual))
    table.add_row(f"  Per Pay Period ({gross.cadence_label.capitalize()})", f"[bold]{_fmt(gross.per_period)}[/bold]")
    table.add_row("", "")

    _add_tax_rows(table, breakdown.taxes)

    if breakdown.deductions.total > 0:
        _add_deduction_rows(table, breakdown.deductions)

    net = breakdown.net_pay
    table.add_row("[bold green]NET PAY (TAKE HOME)[/bold green]", "")
    table.add_row("  Annual Net Pay", _fmt(net.annual))
    table.add_row("  Per Pay Period", f"[bold green]{_fmt(net.per_period)}[/bold green]")

    console.print(table)

    if response is not None:
        _render_footer(console, response)


def _render_summary(console: Console, breakdown: Breakdown) -> None:
    """Render gross/net per period with the take-home split."""
    take_home = breakdown.net_pay.take_home_percentage
    text = (
        f"Gross Pay: [bold]{_fmt(breakdown.gross_pay.per_period)}[/bold]    "
        f"Net Pay: [bold green]{_fmt(breakdown.net_pay.per_period)}[/bold green]\n"
        f"Take home: {take_home:.1f}%    "
        f"Taxes & Deductions: {100 - take_home:.1f}%"
    )
    console.print(Panel(text, title="Summary", border_style="blue"))


def _add_tax_rows(table: Table, taxes: Taxes) -> None:
    table.add_row("[bold]TAXES[/bold]", "")

    if taxes.federal is not None:
        _add_tax_item(table, "  Federal Income Tax", taxes.federal)

    table.add_row("  FICA Taxes", _fmt(taxes.fica.total))
    fica = (
        ("    Social Security", taxes.fica.social_security),
        ("    Medicare", taxes.fica.medicare),
        ("    Additional Medicare", taxes.fica.additional_medicare),
    )
    for label, item in fica:
        if item is not None:
            _add_tax_item(table, label, item)

    if taxes.state is not None:
        _add_tax_item(table, "  State Income Tax", taxes.state)
    if taxes.local is not None:
        _add_tax_item(table, "  Local Tax", taxes.local)

    table.add_row("  [dim]Total Taxes[/dim]", f"[bold]{_fmt(taxes.total_taxes)}[/bold]")
    table.add_row("  [dim]Effective Tax Rate[/dim]", f"{taxes.effective_tax_rate:.2f}%")
    table.add_row("", "")


def _add_tax_item(table: Table, label: str, item: TaxBreakdownItem) -> None:
    amount = _fmt(item.amount)
    if item.rate is not None:
        amount = f"{amount} [dim](Rate: {item.rate:.2f}%)[/dim]"
    table.add_row(label, amount)


def _add_deduction_rows(table: Table, deductions: Deductions) -> None:
    table.add_row("[bold]DEDUCTIONS[/bold]", "")

    if deductions.pre_tax_items:
        table.add_row("  Pre-Tax Deductions", "")
        for item in deductions.pre_tax_items:
            table.add_row(f"    {item.name}", _fmt(item.amount))

    if deductions.post_tax_items:
        table.add_row("  Post-Tax Deductions", "")
        for item in deductions.post_tax_items:
            table.add_row(f"    {item.name}", _fmt(item.amount))

    table.add_row("  [dim]Total Deductions[/dim]", f"[bold]{_fmt(deductions.total)}[/bold]")
    table.add_row("", "")


def _render_footer(console: Console, response: CalculationResponse) -> None:
    """Render calculation metadata and explanation notes."""
    console.print(
        f"[dim]Calculation {response.calculation_id} - rule pack {response.rule_pack_version} "
        f"({response.currency})[/dim]"
    )
    for note in response.explanation:
        console.print(f"[dim]  - {note.text}[/dim]")


def _fmt(amount: Optional[float]) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
