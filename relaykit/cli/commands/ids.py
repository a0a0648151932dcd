"""Global identifier commands."""

import sys

import click

from relaykit.cli.utils import error
from relaykit.core.exceptions import InvalidIdentifierError
from relaykit.core.identity import GlobalIdCodec


@click.group(name="ids")
def ids() -> None:
    """Encode and decode opaque global identifiers."""


@ids.command()
@click.argument("type_name")
@click.argument("local_id")
def encode(type_name: str, local_id: str) -> None:
    """Encode TYPE_NAME and LOCAL_ID into a global identifier."""
    try:
        click.echo(GlobalIdCodec([type_name]).encode(type_name, local_id))
    except InvalidIdentifierError as e:
        error(e.detail)
        sys.exit(1)


@ids.command()
@click.argument("token")
@click.option(
    "--type",
    "known_types",
    multiple=True,
    required=True,
    help="Accepted type name (repeatable)",
)
def decode(token: str, known_types: tuple[str, ...]) -> None:
    """Decode TOKEN and print its type name and local id."""
    try:
        global_id = GlobalIdCodec(known_types).decode(token)
    except InvalidIdentifierError as e:
        error(e.detail)
        sys.exit(1)
    click.echo(f"type_name: {global_id.type_name}")
    click.echo(f"local_id:  {global_id.local_id}")
