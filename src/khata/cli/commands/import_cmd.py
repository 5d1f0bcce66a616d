"""CSV import command."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.cli.output import echo_json
from khata.domain.csv_import import CSVImportService
from khata.domain.entities import ColumnMapping


def parse_mapping_options(ctx: click.Context, pairs: tuple[str, ...]) -> ColumnMapping | None:
    """Turn repeated ``field=column`` options into a column mapping."""
    if not pairs:
        return None

    values = {}
    for pair in pairs:
        field_name, sep, column = pair.partition("=")
        field_name = field_name.strip()
        if not sep or not column.strip():
            click.echo(f"Error: Invalid --map value '{pair}', expected field=column", err=True)
            ctx.exit(1)
        if field_name not in ColumnMapping.field_names():
            click.echo(
                f"Error: Unknown field '{field_name}'. "
                f"Valid fields: {', '.join(ColumnMapping.field_names())}",
                err=True,
            )
            ctx.exit(1)
        values[field_name] = column.strip()
    return ColumnMapping(**values)


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option(
    "--map",
    "mappings",
    multiple=True,
    help="Column for a field, e.g. --map amount='Withdrawal Amt'. Unmapped fields are auto-detected.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the import result as JSON")
@click.pass_context
def import_csv(ctx, csv_file: str, mappings: tuple[str, ...], as_json: bool):
    """Import transactions from a bank or accounting CSV export."""
    db = ctx.obj["db"]
    service = CSVImportService(db)
    mapping = parse_mapping_options(ctx, mappings)

    try:
        result = service.import_csv(ctx.obj["owner"], csv_file, mapping=mapping)
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(result)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} transactions")
    click.echo(f"  Dropped: {result['dropped']} rows without a positive amount")
    click.echo("  Columns used:")
    for field_name in ColumnMapping.field_names():
        column = getattr(result["mapping"], field_name)
        if column:
            click.echo(f"    {field_name:<12} <- {column}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
