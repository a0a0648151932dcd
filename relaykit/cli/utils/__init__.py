"""CLI output helpers."""

from relaykit.cli.utils.formatters import error, info, success

__all__ = ["error", "info", "success"]
