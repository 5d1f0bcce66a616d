"""Shared rendering helpers for CLI commands."""

import json
from typing import Any

import click

from khata.api import to_jsonable
from khata.utils.formatting import format_inr


def echo_json(data: Any) -> None:
    """Print domain data as indented JSON."""
    click.echo(json.dumps(to_jsonable(data), indent=2, ensure_ascii=False))


def echo_heading(title: str, width: int = 60) -> None:
    click.echo(f"\n{title}")
    click.echo("-" * width)


def echo_amount_row(label: str, amount: Any, width: int = 40) -> None:
    click.echo(f"  {label:<{width}} {format_inr(amount):>15}")
