"""Configuration-related CLI commands."""

from __future__ import annotations

import json

import typer

from sshcopyid.cli._shared import show_help_if_no_subcommand
from sshcopyid.config import ConfigStore

config_app = typer.Typer(help="Manage application configuration")


@config_app.callback(invoke_without_command=True)
def config_root(ctx: typer.Context) -> None:
    """Display contextual help when no subcommand is provided."""

    show_help_if_no_subcommand(ctx)


@config_app.command("show")
def show_config() -> None:
    """Display the current application configuration."""

    store = ConfigStore()
    config = store.load()
    payload = config.to_payload()
    payload["effective_identity_candidates"] = list(config.effective_identity_candidates)
    typer.echo(json.dumps(payload, indent=2))


@config_app.command("set-ssh-command")
def set_ssh_command(
    command: str = typer.Argument(
        ...,
        metavar="COMMAND",
        help="Name or path of the ssh client executable.",
    ),
) -> None:
    """Persist the ssh client used to reach remote hosts."""

    store = ConfigStore()
    config = store.load()
    try:
        config.set_ssh_command(command)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc
    store.save(config)
    typer.echo(f"ssh command set to: {config.ssh_command}")


@config_app.command("set-identity-candidates")
def set_identity_candidates(
    names: list[str] = typer.Argument(
        ...,
        metavar="NAME...",
        help="Key file names inside ~/.ssh, in the order they should be tried.",
    ),
) -> None:
    """Persist the ordered key file names checked when no -i is given."""

    store = ConfigStore()
    config = store.load()
    try:
        config.set_identity_candidates(names)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc
    store.save(config)
    typer.echo("Identity candidates: " + ", ".join(config.identity_candidates))


@config_app.command("reset")
def reset_config() -> None:
    """Discard the configuration file and return to the defaults."""

    store = ConfigStore()
    store.reset()
    typer.echo("Configuration reset to defaults.")
