"""Financial report commands."""

from datetime import date
from decimal import Decimal
from typing import Optional

import click
from bookkit.cli.error_handling import handle_domain_error
from bookkit.cli.formatting import WIDTH, echo_line, echo_section, money, percent
from bookkit.cli.period_options import period_options, resolve_cli_period
from bookkit.domain.entities import (
    BalanceSheet,
    CashFlowStatement,
    Period,
    ProfitAndLoss,
    ReportType,
    TaxSummary,
)
from bookkit.domain.report import ReportService

REPORT_TITLES = {
    ReportType.PROFIT_AND_LOSS: "Profit & Loss Statement",
    ReportType.BALANCE_SHEET: "Balance Sheet",
    ReportType.CASH_FLOW: "Cash Flow Statement",
    ReportType.TAX_SUMMARY: "Tax Summary",
}


def save_options(func):
    """Add --save and --notes options to a report command."""
    func = click.option("--notes", help="Notes stored with a saved report")(func)
    func = click.option("--save", is_flag=True, help="Save the report so it can be verified later")(func)
    return func


def _echo_header(report_type: ReportType, period: Period) -> None:
    click.echo(f"\n{REPORT_TITLES[report_type]}")
    click.echo(f"Period: {period.label} ({period.start_date} to {period.end_date})")
    click.echo("=" * WIDTH)


def _run_report(
    ctx,
    report_type: ReportType,
    period: Period,
    save: bool,
    notes: Optional[str],
    tax_rate: Optional[Decimal] = None,
):
    """Generate (and optionally save) a statement, exiting on domain errors."""
    service = ReportService(ctx.obj["db"])
    try:
        if save:
            report_id, statement = service.save_report(
                report_type, period, tax_rate=tax_rate, notes=notes
            )
        else:
            report_id = None
            statement = service.generate(report_type, period, tax_rate=tax_rate)
    except ValueError as e:
        handle_domain_error(ctx, e)
    return report_id, statement


def _echo_saved(report_id: Optional[int]) -> None:
    if report_id is not None:
        click.echo(f"\nSaved report {report_id}")


def render_profit_and_loss(statement: ProfitAndLoss) -> None:
    """Print a profit and loss statement."""
    echo_section("Revenue", statement.revenue, "Total Revenue", show_percent=True)
    echo_section("Expenses", statement.expenses, "Total Expenses", show_percent=True)
    echo_line("Gross Profit", statement.gross_profit)
    echo_line("Net Profit", statement.net_profit)
    click.echo(f"{'Profit Margin':<50} {percent(statement.profit_margin):>20}")


def render_balance_sheet(statement: BalanceSheet) -> None:
    """Print a balance sheet."""
    echo_section("Current Assets", statement.current_assets, "Total Current Assets")
    echo_section("Fixed Assets", statement.fixed_assets, "Total Fixed Assets")
    echo_line("TOTAL ASSETS", statement.total_assets)
    click.echo("")
    echo_section("Current Liabilities", statement.current_liabilities, "Total Current Liabilities")
    echo_section(
        "Long-term Liabilities", statement.long_term_liabilities, "Total Long-term Liabilities"
    )
    echo_line("TOTAL LIABILITIES", statement.total_liabilities)
    click.echo("")
    echo_section("Equity", statement.equity, "Total Equity")
    echo_line("TOTAL LIABILITIES & EQUITY", statement.total_liabilities_and_equity)


def render_cash_flow(statement: CashFlowStatement) -> None:
    """Print a cash flow statement."""
    echo_section("Operating Activities", statement.operating, "Net Cash from Operating Activities")
    echo_section("Investing Activities", statement.investing, "Net Cash from Investing Activities")
    echo_section("Financing Activities", statement.financing, "Net Cash from Financing Activities")
    echo_line("Net Change in Cash", statement.net_change)
    echo_line("Beginning Cash", statement.beginning_cash)
    echo_line("Ending Cash", statement.ending_cash)
    if statement.period.end_date < date.today():
        click.echo("Note: Ending cash is the current bank balance, not the balance at period end.")


def render_tax_summary(summary: TaxSummary) -> None:
    """Print a tax summary."""
    click.echo(f"{'Tax Rate':<50} {percent(summary.tax_rate):>20}")
    echo_line("Total Income", summary.total_income)
    echo_line("Total Expenses", summary.total_expenses)
    echo_line("Tax Deductible Expenses", summary.total_deductible)
    echo_line("Net Taxable Income", summary.net_taxable_income)
    echo_line("Estimated Tax Savings", summary.estimated_tax_savings)
    click.echo("=" * WIDTH)

    click.echo("Deductions by Category")
    click.echo("*" * WIDTH)
    if not summary.categorized_deductions:
        click.echo("    No tax deductible expenses")
    for item in summary.categorized_deductions:
        echo_line(item.name, item.amount, indent=4, extra=percent(item.percentage))
    click.echo("=" * WIDTH)

    click.echo("Quarterly Estimated Tax")
    click.echo("*" * WIDTH)
    if not summary.quarterly_estimates:
        click.echo("    No transactions in period")
    else:
        click.echo(f"    {'Quarter':<12} {'Income':>18} {'Deductible':>18} {'Estimated Tax':>18}")
        for estimate in summary.quarterly_estimates:
            click.echo(
                f"    {estimate.quarter:<12} {money(estimate.income):>18} "
                f"{money(estimate.deductible):>18} {money(estimate.estimated_tax):>18}"
            )
    click.echo("=" * WIDTH)

    click.echo(f"Likely forms: {', '.join(summary.forms)}")
    if summary.low_deduction_rate:
        click.echo(
            "Tip: Less than 30% of expenses are marked tax deductible. "
            "Review your expenses for missed deductions."
        )


@click.group()
def report_group():
    """Generate financial reports."""
    pass


@report_group.command("pnl")
@period_options
@save_options
@click.pass_context
def profit_and_loss(ctx, granularity: str, year: int | None, month: str | None, save: bool, notes: str | None):
    """Show the profit and loss statement for a period.

    Examples:
        bookkit report pnl
        bookkit report pnl --granularity quarter --year 2024 --month 5
        bookkit report pnl --granularity year --year 2024 --save
    """
    period = resolve_cli_period(ctx, granularity=granularity, year=year, month=month)
    report_id, statement = _run_report(ctx, ReportType.PROFIT_AND_LOSS, period, save, notes)
    _echo_header(ReportType.PROFIT_AND_LOSS, period)
    render_profit_and_loss(statement)
    _echo_saved(report_id)


@report_group.command("balance-sheet")
@period_options
@save_options
@click.pass_context
def balance_sheet(ctx, granularity: str, year: int | None, month: str | None, save: bool, notes: str | None):
    """Show the balance sheet for a period.

    Cash is taken from the current balances of active bank accounts.
    """
    period = resolve_cli_period(ctx, granularity=granularity, year=year, month=month)
    report_id, statement = _run_report(ctx, ReportType.BALANCE_SHEET, period, save, notes)
    _echo_header(ReportType.BALANCE_SHEET, period)
    render_balance_sheet(statement)
    _echo_saved(report_id)


@report_group.command("cash-flow")
@period_options
@save_options
@click.pass_context
def cash_flow(ctx, granularity: str, year: int | None, month: str | None, save: bool, notes: str | None):
    """Show the cash flow statement (indirect method) for a period.

    Ending cash is the current balance of active bank accounts, so for
    past periods it reflects today's balances rather than the period end.
    """
    period = resolve_cli_period(ctx, granularity=granularity, year=year, month=month)
    report_id, statement = _run_report(ctx, ReportType.CASH_FLOW, period, save, notes)
    _echo_header(ReportType.CASH_FLOW, period)
    render_cash_flow(statement)
    _echo_saved(report_id)


@report_group.command("tax")
@period_options
@click.option(
    "--rate",
    type=click.FloatRange(0, 100),
    help="Tax rate percentage (default: the stored rate for the year, or 25)",
)
@save_options
@click.pass_context
def tax_summary(
    ctx,
    granularity: str,
    year: int | None,
    month: str | None,
    rate: float | None,
    save: bool,
    notes: str | None,
):
    """Show deductions and estimated quarterly tax for a period.

    Examples:
        bookkit report tax --granularity year --year 2024
        bookkit report tax --granularity year --rate 30
    """
    period = resolve_cli_period(ctx, granularity=granularity, year=year, month=month)
    tax_rate = Decimal(str(rate)) if rate is not None else None
    report_id, summary = _run_report(
        ctx, ReportType.TAX_SUMMARY, period, save, notes, tax_rate=tax_rate
    )
    _echo_header(ReportType.TAX_SUMMARY, period)
    render_tax_summary(summary)
    _echo_saved(report_id)


@report_group.command("history")
@click.option(
    "--type",
    "report_type",
    type=click.Choice([t.value for t in ReportType], case_sensitive=False),
    help="Only show one kind of report",
)
@click.pass_context
def report_history(ctx, report_type: str | None):
    """List saved reports, newest first."""
    service = ReportService(ctx.obj["db"])

    reports = service.list_reports(report_type=report_type.lower() if report_type else None)
    if not reports:
        click.echo("No saved reports found.")
        return

    click.echo("\nSaved reports:")
    click.echo("-" * WIDTH)
    click.echo(f"{'ID':<6} {'Type':<16} {'Period':<25} {'Generated':<20} {'Digest':<12}")
    click.echo("-" * WIDTH)
    for report in reports:
        period = f"{report.period_start} - {report.period_end}"
        generated = report.generated_at.strftime("%Y-%m-%d %H:%M")
        click.echo(
            f"{report.id:<6} {report.report_type.value:<16} {period:<25} "
            f"{generated:<20} {report.transactions_digest[:12]:<12}"
        )


@report_group.command("verify")
@click.argument("report_id", type=int)
@click.pass_context
def verify_report(ctx, report_id: int):
    """Check whether a saved report still matches the current data.

    A report is out of date when transactions or bank balances it was
    derived from have changed since it was saved.
    """
    service = ReportService(ctx.obj["db"])

    try:
        verification = service.verify_report(report_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    report = verification.report
    click.echo(
        f"Report {report.id} ({report.report_type.value}, "
        f"{report.period_start} to {report.period_end})"
    )
    if verification.is_current:
        click.echo("Status: current - regenerating it would give the same result")
    else:
        click.echo("Status: out of date - underlying data changed since it was saved")
        click.echo(f"  Saved digest:   {report.transactions_digest}")
        click.echo(f"  Current digest: {verification.current_digest}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
