"""Typer command-line interface for sshcopyid."""
