"""Sample data command."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.domain.errors import DomainError
from khata.domain.seed import SeedService


@click.command("seed")
@click.option("--months", type=click.IntRange(1, 60), default=12, show_default=True, help="Months of history")
@click.option("--seed", "random_seed", type=int, help="Random seed for a reproducible ledger")
@click.option("--reset", is_flag=True, help="Delete existing transactions first")
@click.pass_context
def seed(ctx, months: int, random_seed: int | None, reset: bool):
    """Fill the books with sample transactions."""
    db = ctx.obj["db"]
    owner_id = ctx.obj["owner"]
    service = SeedService(db)

    try:
        count = service.seed(owner_id, months=months, seed=random_seed, reset=reset)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {count} sample transactions over {months} month(s) for '{owner_id}'")


def register_commands(cli):
    """Register seed command with main CLI."""
    cli.add_command(seed)
