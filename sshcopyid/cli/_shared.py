"""Shared helpers for Typer-based CLI components."""

from __future__ import annotations

import logging
import sys

import typer

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def show_help_if_no_subcommand(ctx: typer.Context) -> None:
    """Emit contextual help when a subcommand is not provided."""

    if ctx.invoked_subcommand or ctx.resilient_parsing:
        return
    typer.echo(ctx.get_help())
    raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route package log records to stderr, at DEBUG level when ``verbose``."""

    package_logger = logging.getLogger("sshcopyid")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_sshcopyid_cli", False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler._sshcopyid_cli = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
