"""
Shared helpers and decorators for stackpush CLI commands.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import click

from stackpush.utils.logging import set_verbose


def verbose_callback(_: click.Context, __: click.Option, value: bool) -> bool:
    """Callback used by --verbose option on the root CLI and commands."""
    if value:
        set_verbose(True)
    return value


def add_verbose_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to add the shared verbose flag to a command."""
    return click.option(
        "--verbose",
        "-v",
        is_flag=True,
        default=False,
        help="Enable verbose output (show INFO lines and remote command output)",
        callback=verbose_callback,
        expose_value=False,
        is_eager=True,
    )(func)


def click_prompt(text: str, default: Optional[str], secret: bool) -> str:
    """Prompt for one value; pressing Enter yields the default or an empty string."""
    return click.prompt(
        text,
        default=default if default is not None else "",
        show_default=bool(default),
        hide_input=secret,
    )
