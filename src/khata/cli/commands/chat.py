"""Chat command."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.cli.output import echo_json
from khata.domain.chat import ChatService
from khata.domain.errors import DomainError


@click.command("chat")
@click.argument("message", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Print the reply and its figures as JSON")
@click.pass_context
def chat(ctx, message: tuple[str, ...], as_json: bool):
    """Ask a question about the books.

    Examples:
        khata chat "What are my biggest expenses?"
        khata chat how much gst do I owe
    """
    db = ctx.obj["db"]
    service = ChatService(db)

    try:
        reply = service.ask(ctx.obj["owner"], " ".join(message))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json({"message": reply.message, "data": reply.data})
    else:
        click.echo(reply.message)


def register_commands(cli):
    """Register chat command with main CLI."""
    cli.add_command(chat)
