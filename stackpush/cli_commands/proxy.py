"""
Reverse proxy commands for stackpush.
"""

from __future__ import annotations

import click

from stackpush.core.nginx_manager import render_server_block


def register_commands(cli) -> None:
    @cli.command("render-proxy")
    @click.option("--host", required=True, help="Public IP or hostname used as server_name")
    @click.option("--port", required=True, help="Internal application port to proxy to")
    def render_proxy(host: str, port: str):
        """Print the Nginx server block that 'deploy' would install."""
        click.echo(render_server_block(host, port), nl=False)
