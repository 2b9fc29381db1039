"""Command-line interface for the sshcopyid application."""

from __future__ import annotations

import shlex
import sys
from collections.abc import Sequence

import click
import typer

from sshcopyid import __version__
from sshcopyid.cli._shared import configure_logging, show_help_if_no_subcommand
from sshcopyid.cli.config import config_app
from sshcopyid.cli.ssh_launcher import SubprocessLauncher
from sshcopyid.config import AppConfig, ConfigStore
from sshcopyid.core.destination import DEFAULT_PORT, Destination
from sshcopyid.core.errors import Interrupted, SshCopyIdError
from sshcopyid.core.identity import IdentityResolver
from sshcopyid.core.remote import RemoteInstaller

app = typer.Typer(help="Install your SSH public key on a remote host.")
app.add_typer(config_app, name="config", help="Inspect and adjust configuration")

# Leading arguments that belong to the root command rather than ``install``.
_ROOT_OPTIONS = frozenset(
    {"--help", "--version", "-V", "--install-completion", "--show-completion"}
)


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the application's version and exit.",
        is_eager=True,
    ),
) -> None:
    """Copy a public key into a remote account's authorized_keys."""
    if version:
        typer.echo(__version__)
        raise typer.Exit()

    show_help_if_no_subcommand(ctx)


def _build_resolver(config: AppConfig) -> IdentityResolver:
    """Create the identity resolver for the current user."""

    return IdentityResolver.from_environment(config.effective_identity_candidates)


def _build_installer(config: AppConfig) -> RemoteInstaller:
    """Create the remote installer that drives the system ssh client."""

    return RemoteInstaller(SubprocessLauncher(), ssh_command=config.ssh_command)


def _login_hint(destination: Destination) -> str:
    """Return the ssh command a user should try after installing the key."""

    parts = ["ssh"]
    if destination.port != DEFAULT_PORT:
        parts.extend(["-p", str(destination.port)])
    parts.append(destination.target)
    return shlex.join(parts)


def run_install(
    target: str,
    *,
    identity_file: str | None = None,
    port: int | None = None,
    ssh_options: Sequence[str] = (),
    dry_run: bool = False,
) -> int:
    """Resolve a key, install it on ``target`` and return the exit code."""

    config = ConfigStore().load()
    try:
        destination = Destination.parse(target, port)
        key = _build_resolver(config).resolve(identity_file)
        typer.echo(f"Source: {key.source} ({key.algorithm} {key.fingerprint})")
        typer.echo(f"Target: {destination.target}")

        installer = _build_installer(config)
        if dry_run:
            argv = installer.prepare(key, destination, options=ssh_options)
            typer.echo(f"Would run: {shlex.join(argv)}")
            return 0
        installer.install(key, destination, options=ssh_options)
    except SshCopyIdError as exc:
        typer.echo(str(exc), err=True)
        return exc.exit_code

    typer.echo("")
    typer.echo(f"Key installed: {key.fingerprint}")
    typer.echo(f'Now try logging into the machine, with:   "{_login_hint(destination)}"')
    typer.echo("and check to make sure that only the key(s) you wanted were added.")
    return 0


@app.command("install")
def install(
    destination: str = typer.Argument(
        ...,
        metavar="[USER@]HOST",
        help="Remote account to install the key for.",
    ),
    identity_file: str | None = typer.Option(
        None,
        "--identity-file",
        "-i",
        help="Public key to install (a private key path selects its .pub file).",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        min=1,
        max=65535,
        help="Port to connect to on the remote host.",
    ),
    ssh_options: list[str] | None = typer.Option(
        None,
        "--option",
        "-o",
        help="Extra ssh client option, e.g. -o 'StrictHostKeyChecking=accept-new'.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show the ssh invocation without running it.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details."),
) -> None:
    """Append a public key to ~/.ssh/authorized_keys on the remote host."""

    configure_logging(verbose)
    exit_code = run_install(
        destination,
        identity_file=identity_file,
        port=port,
        ssh_options=ssh_options or (),
        dry_run=dry_run,
    )
    raise typer.Exit(exit_code)


def _known_subcommand_names() -> set[str]:
    """Collect all registered top-level command names."""

    names: set[str] = {info.name for info in app.registered_commands if info.name is not None}
    names.update(name for info in app.registered_groups if (name := info.name) is not None)
    return names


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the sshcopyid CLI."""

    args = list(argv) if argv is not None else list(sys.argv[1:])
    if args and args[0] not in _known_subcommand_names() and args[0] not in _ROOT_OPTIONS:
        args.insert(0, "install")

    try:
        result = app(args=args, standalone_mode=False)
    except typer.Exit as exc:  # exit path already handled by Typer
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        typer.echo(str(Interrupted()), err=True)
        return Interrupted.exit_code
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover - manual execution only
    raise SystemExit(main())
