"""Pagination cursor commands."""

import sys

import click

from relaykit.cli.utils import error
from relaykit.core.exceptions import InvalidCursorError
from relaykit.core.pagination import CursorCodec, Ordering


@click.group(name="cursors")
def cursors() -> None:
    """Inspect pagination cursors."""


@cursors.command()
@click.argument("token")
@click.option("--field", "field_name", required=True, help="Primary sort field")
@click.option("--tiebreak", default="id", show_default=True, help="Tiebreak field")
@click.option("--descending", is_flag=True, help="Ordering is descending")
def decode(token: str, field_name: str, tiebreak: str, descending: bool) -> None:
    """Decode TOKEN under the given ordering and print its order key."""
    ordering = Ordering(field_name, tiebreak=tiebreak, descending=descending)
    try:
        key = CursorCodec(ordering).decode(token)
    except InvalidCursorError as e:
        error(e.detail)
        sys.exit(1)
    click.echo(f"ordering: {ordering.signature}")
    click.echo(f"{field_name}: {key.primary!r}")
    click.echo(f"{tiebreak}: {key.tiebreak!r}")
