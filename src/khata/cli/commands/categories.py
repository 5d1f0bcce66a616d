"""Category and TDS section listing."""

import click
from khata.domain.entities import DEFAULT_CATEGORIES, TDS_SECTIONS, TransactionType


@click.command("categories")
@click.option("--tds", is_flag=True, help="List TDS sections instead")
def categories(tds: bool):
    """List the default categories.

    Imports may use any category name; these are the ones inferred from
    transaction descriptions.
    """
    if tds:
        click.echo("\nTDS sections:")
        for section in TDS_SECTIONS.values():
            click.echo(f"  {section.code:<6} {section.name:<20} {section.rate:>5}%")
        return

    for txn_type in TransactionType:
        click.echo(f"\n{txn_type.value.capitalize()}:")
        for name, category_type in DEFAULT_CATEGORIES:
            if category_type == txn_type:
                click.echo(f"  {name}")


def register_commands(cli):
    """Register categories command with main CLI."""
    cli.add_command(categories)
