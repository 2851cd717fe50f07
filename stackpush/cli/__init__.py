"""
Click CLI framework for stackpush CLI.
"""

from __future__ import annotations

import sys

import click

from stackpush.cli.helpers import verbose_callback
from stackpush.cli_commands import register_all_commands
from stackpush.config.settings import VERSION
from stackpush.utils.logging import log_error


def _build_cli() -> click.Group:
    cli = click.Group(
        name="stackpush",
        help="""Stackpush: deploy a Dockerized Git repository to a remote host.

Clones the repository, copies it over SSH, builds and starts the containers,
puts Nginx in front of them and checks the public URL answers.

Examples:
    stackpush deploy
    stackpush deploy --config deploy.yml --verbose
    stackpush render-proxy --host 203.0.113.10 --port 8080
""",
    )
    cli = click.version_option(version=VERSION, prog_name="stackpush")(cli)
    cli = click.option(
        "--verbose",
        "-v",
        is_flag=True,
        default=False,
        help="Enable verbose output (show INFO lines and remote command output)",
        callback=verbose_callback,
        expose_value=False,
        is_eager=True,
    )(cli)

    register_all_commands(cli)
    return cli


cli = _build_cli()


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        log_error("Operation cancelled by user")
        sys.exit(1)


__all__ = ["cli", "main"]
