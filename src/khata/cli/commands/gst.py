"""GST and TDS report command."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.cli.output import echo_amount_row, echo_heading, echo_json
from khata.domain.errors import DomainError
from khata.domain.gst import GSTService
from khata.utils.formatting import format_inr


@click.command("gst")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables")
@click.pass_context
def gst_report(ctx, as_json: bool):
    """Show GST liability, input credit, TDS and filing due dates."""
    db = ctx.obj["db"]
    service = GSTService(db)

    try:
        report = service.report(ctx.obj["owner"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(report)
        return

    summary = report["summary"]
    current = summary["current_month"]

    echo_heading("GST totals (all periods)")
    echo_amount_row("Output GST", summary["total_output_gst"])
    echo_amount_row("Input GST credit", summary["total_input_gst"])
    echo_amount_row("Net liability", summary["total_net_liability"])

    echo_heading(f"Current month ({current.period})")
    click.echo(f"  {'':<10} {'CGST':>12} {'SGST':>12} {'IGST':>12}")
    click.echo(
        f"  {'Output':<10} {format_inr(current.output_cgst):>12} "
        f"{format_inr(current.output_sgst):>12} {format_inr(current.output_igst):>12}"
    )
    click.echo(
        f"  {'Input':<10} {format_inr(current.input_cgst):>12} "
        f"{format_inr(current.input_sgst):>12} {format_inr(current.input_igst):>12}"
    )
    echo_amount_row("Net liability", current.net_liability)

    echo_heading("GST by rate")
    if not report["gst_by_rate"]:
        click.echo("  No GST transactions recorded.")
    for row in report["gst_by_rate"]:
        click.echo(
            f"  {row['rate']:>3.0f}%  output {format_inr(row['output']):>12}  "
            f"input {format_inr(row['input']):>12}  net {format_inr(row['net']):>12}"
        )

    echo_heading("Monthly trend")
    for month in report["monthly_trend"]:
        click.echo(
            f"  {month['month']:<10} output {format_inr(month['output']):>12}  "
            f"input {format_inr(month['input']):>12}  liability {format_inr(month['liability']):>12}"
        )

    echo_heading("TDS withheld")
    if not report["tds"]:
        click.echo("  No TDS deductions recorded.")
    for row in report["tds"]:
        echo_amount_row(f"{row['section']} {row['name']}", row["amount"])

    filing = report["filing"]
    echo_heading("Filing due dates")
    click.echo(f"  GSTR-3B:      {filing['gstr3b_due']:%d %b %Y}")
    click.echo(f"  GSTR-1:       {filing['gstr1_due']:%d %b %Y}")
    click.echo(f"  TDS deposit:  {filing['tds_deposit_due']:%d %b %Y}")


def register_commands(cli):
    """Register GST command with main CLI."""
    cli.add_command(gst_report)
