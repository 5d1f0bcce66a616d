"""Transaction management commands."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.cli.output import echo_json
from khata.domain.entities import TransactionType
from khata.domain.errors import DomainError
from khata.domain.transaction import TransactionService
from khata.utils.date_parser import parse_date
from khata.utils.formatting import format_inr, group_indian


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or DD/MM/YYYY)")
@click.option("--end-date", help="End date (YYYY-MM-DD or DD/MM/YYYY)")
@click.option("--limit", type=int, help="Show at most this many transactions")
@click.option("--verbose", "-v", is_flag=True, help="Show GST, TDS and party columns")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@click.pass_context
def list_transactions(
    ctx, start_date: str, end_date: str, limit: int | None, verbose: bool, as_json: bool
):
    """View transactions, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    start = parse_date(start_date) if start_date else None
    end = parse_date(end_date) if end_date else None

    try:
        transactions = service.list_transactions(
            ctx.obj["owner"], start_date=start, end_date=end, limit=limit
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(transactions)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {txn.date}")
            click.echo(f"  Amount: ₹{group_indian(txn.amount, 2)} ({txn.type.value})")
            click.echo(f"  Category: {txn.category}")
            click.echo(f"  Description: {txn.description}")
            if txn.has_gst:
                click.echo(f"  GST: {txn.gst_rate:.0f}% ({txn.gst_type.value})")
            if txn.tds_section:
                click.echo(f"  TDS: section {txn.tds_section} at {txn.tds_rate}%")
            if txn.party_name or txn.party_gstin:
                gstin = f" [{txn.party_gstin}]" if txn.party_gstin else ""
                click.echo(f"  Party: {txn.party_name or ''}{gstin}")
            click.echo("-" * 100)
    else:
        click.echo("-" * 100)
        click.echo(
            f"{'ID':<6} {'Date':<12} {'Type':<8} {'Amount':>16} {'GST':>5}  {'Category':<20} {'Description':<28}"
        )
        click.echo("-" * 100)
        for txn in transactions:
            gst = f"{txn.gst_rate:.0f}%" if txn.gst_rate is not None else ""
            click.echo(
                f"{txn.id:<6} {str(txn.date):<12} {txn.type.value:<8} "
                f"{'₹' + group_indian(txn.amount, 2):>16} {gst:>5}  "
                f"{txn.category[:20]:<20} {txn.description[:28]:<28}"
            )

    total_income = sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
    total_expenses = sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE)
    click.echo("-" * 100)
    click.echo(
        f"{'TOTAL':<6} Income: {format_inr(total_income)} | "
        f"Expenses: {format_inr(total_expenses)} | Count: {len(transactions)}"
    )


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and rebuild GST summaries.

    Examples:
        khata transactions delete 1
    """
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner"]
    service = TransactionService(db)

    txn = service.get_transaction(owner_id, transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete transaction {transaction_id} ({txn.date}, {format_inr(txn.amount)}, {txn.description[:40]})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(owner_id, transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transactions")
