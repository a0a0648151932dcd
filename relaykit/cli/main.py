"""Main CLI entry point for relaykit developer commands."""

import click

from relaykit import __version__
from relaykit.cli.commands import cursors, ids, registry
from relaykit.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="relaykit")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """relaykit CLI - Inspect identifiers and cursors, check registries.

    \b
    Command Groups:
      ids        Encode and decode global identifiers
      cursors    Decode pagination cursors
      registry   Validate schema/resolver registries

    \b
    Quick Start:
      relaykit ids encode User 42
      relaykit ids decode <token> --type User
      relaykit cursors decode <cursor> --field created_at --descending
      relaykit registry check myapp.graphql:build_registry
    """
    ctx.ensure_object(dict)


cli.add_command(ids.ids)
cli.add_command(cursors.cursors)
cli.add_command(registry.registry)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
