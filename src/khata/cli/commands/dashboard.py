"""Dashboard command."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.cli.output import echo_amount_row, echo_heading, echo_json
from khata.domain.dashboard import DashboardService
from khata.domain.errors import DomainError
from khata.utils.formatting import format_inr

KPI_LABELS = [
    ("this_month_revenue", "Revenue (this month)"),
    ("this_month_expenses", "Expenses (this month)"),
    ("net_profit", "Net profit (this month)"),
    ("cash_balance", "Cash balance"),
    ("gst_liability", "GST liability (this month)"),
    ("ytd_revenue", "Revenue (year to date)"),
    ("ytd_expenses", "Expenses (year to date)"),
]


@click.command("dashboard")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables")
@click.pass_context
def dashboard(ctx, as_json: bool):
    """Show the business overview."""
    db = ctx.obj["db"]
    service = DashboardService(db)

    try:
        data = service.build(ctx.obj["owner"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(data)
        return

    echo_heading("Key figures")
    for key, label in KPI_LABELS:
        echo_amount_row(label, data["kpis"][key])

    echo_heading("Last 12 months")
    click.echo(f"  {'Month':<10} {'Revenue':>15} {'Expenses':>15}")
    for month in data["monthly_data"]:
        click.echo(
            f"  {month['month']:<10} {format_inr(month['revenue']):>15} "
            f"{format_inr(month['expenses']):>15}"
        )

    echo_heading("Top expense categories")
    if not data["top_expenses"]:
        click.echo("  No expenses recorded.")
    for row in data["top_expenses"]:
        echo_amount_row(row["category"], row["amount"])

    echo_heading("Recent transactions")
    if not data["recent_transactions"]:
        click.echo("  No transactions yet. Import a CSV or run 'khata seed'.")
    for txn in data["recent_transactions"]:
        sign = "+" if txn.is_income else "-"
        click.echo(
            f"  {str(txn.date):<12} {txn.description[:30]:<30} {sign}{format_inr(txn.amount):>14}"
        )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
