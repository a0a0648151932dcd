"""Resolver registry commands."""

import importlib
import sys

import click

from relaykit.cli.utils import error, info, success
from relaykit.core.exceptions import RegistryValidationError
from relaykit.features.graphql.registry import ResolverRegistryBuilder


def _load_builder(target: str) -> ResolverRegistryBuilder:
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter("expected MODULE:ATTR", param_hint="TARGET")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="TARGET") from e
    try:
        builder = getattr(module, attr)
    except AttributeError as e:
        raise click.BadParameter(f"{module_name} has no attribute {attr}", param_hint="TARGET") from e
    if callable(builder) and not isinstance(builder, ResolverRegistryBuilder):
        builder = builder()
    if not isinstance(builder, ResolverRegistryBuilder):
        raise click.BadParameter(f"{target} is not a ResolverRegistryBuilder", param_hint="TARGET")
    return builder


@click.group(name="registry")
def registry() -> None:
    """Validate schema/resolver registries."""


@registry.command()
@click.argument("target")
def check(target: str) -> None:
    """Build the registry exposed at TARGET (MODULE:ATTR) and report violations.

    ATTR may be a ResolverRegistryBuilder or a callable returning one.
    """
    builder = _load_builder(target)
    info(f"Checking {len(builder.declared)} declared fields...")
    try:
        built = builder.build()
    except RegistryValidationError as e:
        error(f"{len(e.violations)} violation(s) found")
        for violation in e.violations:
            click.echo(f"  [{violation.code}] {violation.detail}")
        sys.exit(1)
    success(f"Registry is consistent ({len(built)} fields)")
