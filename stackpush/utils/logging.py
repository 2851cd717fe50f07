"""
Logging and output utilities for stackpush CLI.

This module provides colored console output plus a plain-text copy of every
message written to the run's log file. Registered secrets are masked in both.
"""

from datetime import datetime
from pathlib import Path
from typing import IO, List, Optional

from rich.console import Console
from rich.markup import escape

# Initialize console for colored output
console = Console()

# Global verbose mode flag
_verbose_mode = False

# Run log file sink (plain text, no color codes)
_file_console: Optional[Console] = None
_file_handle: Optional[IO[str]] = None

# Values masked as '***' in every sink
_secrets: List[str] = []


class Colors:
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    PURPLE = "purple"
    CYAN = "cyan"


def set_verbose(enabled: bool) -> None:
    """Set verbose mode for logging output."""
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _verbose_mode


def register_secret(value: Optional[str]) -> None:
    """Register a value that must never appear in console or log output."""
    if value and value not in _secrets:
        _secrets.append(value)
        # Longer values first so overlapping secrets are fully masked
        _secrets.sort(key=len, reverse=True)


def clear_secrets() -> None:
    """Forget all registered secrets."""
    _secrets.clear()


def redact(text: str) -> str:
    """Replace registered secret values in text with '***'."""
    for secret in _secrets:
        text = text.replace(secret, "***")
    return text


def start_log_file(log_dir: Path, prefix: str = "deploy") -> Path:
    """Open a timestamped log file that receives a copy of all output.

    Returns:
        Path to the created log file
    """
    global _file_console, _file_handle
    stop_log_file()
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = log_dir / f"{prefix}_{timestamp}.log"
    _file_handle = open(log_path, "a", encoding="utf-8")
    _file_console = Console(file=_file_handle, no_color=True, highlight=False,
                            soft_wrap=True, width=200)
    return log_path


def stop_log_file() -> None:
    """Close the run log file if one is open."""
    global _file_console, _file_handle
    if _file_handle is not None:
        _file_handle.close()
    _file_handle = None
    _file_console = None


def _emit(tag: str, color: Optional[str], message: str, to_console: bool = True) -> None:
    text = escape(redact(message))
    if tag:
        styled = f"[{color}][{tag}][/{color}] {text}"
        plain = f"[{tag}] {text}"
    else:
        styled = plain = text
    if to_console:
        console.print(styled, highlight=False, soft_wrap=True)
    if _file_console is not None:
        _file_console.print(plain)
        _file_handle.flush()


def log_info(message: str) -> None:
    """Log an info message (only shown in verbose mode, always written to the log file)."""
    _emit("INFO", Colors.BLUE, message, to_console=_verbose_mode)


def log_success(message: str) -> None:
    """Log a success message."""
    _emit("SUCCESS", Colors.GREEN, message)


def log_warning(message: str) -> None:
    """Log a warning message (only shown in verbose mode, always written to the log file)."""
    _emit("WARNING", Colors.YELLOW, message, to_console=_verbose_mode)


def log_error(message: str) -> None:
    """Log an error message."""
    _emit("ERROR", Colors.RED, message)


def log_phase(message: str) -> None:
    """Log a phase message."""
    _emit("PHASE", Colors.PURPLE, message)


def log_remote(line: str) -> None:
    """Log a line of remote command output."""
    _emit("", None, f"  {line}", to_console=_verbose_mode)


def print_plain(message: str) -> None:
    """Print plain text without any prefix."""
    _emit("", None, message)


def error_exit(message: str, exit_code: int = 1) -> None:
    """Log an error and exit."""
    log_error(message)
    raise SystemExit(exit_code)
