"""
Streaming utilities for SSH output in stackpush CLI.

Remote output is read line by line in the calling thread, with stderr merged
into stdout, and echoed through the logging helpers so it reaches both the
console (verbose mode) and the run log file.
"""

import subprocess
from typing import List, Optional, Sequence, Tuple

from .logging import log_error, log_remote, redact


def execute_with_streaming(cmd: Sequence[str], script: Optional[str] = None,
                           timeout: Optional[int] = None,
                           prefix: str = "") -> Tuple[bool, List[str]]:
    """Execute a command, streaming its combined output.

    Args:
        cmd: Command as list
        script: Content to send via stdin (optional)
        timeout: Seconds to wait for the process to exit once its output closes
        prefix: Prefix for logged lines

    Returns:
        Tuple of (success, output_lines)
    """
    lines: List[str] = []
    try:
        process = subprocess.Popen(
            list(cmd),
            stdin=subprocess.PIPE if script is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1  # Line buffered
        )
    except FileNotFoundError:
        log_error(f"'{cmd[0]}' not found. Is it installed and on PATH?")
        return False, lines

    stdin_failed = False
    if script is not None:
        try:
            process.stdin.write(script)
            process.stdin.close()
        except BrokenPipeError:
            # ssh exited early; its output is still read below
            log_error("Remote command closed its input before the script was sent")
            stdin_failed = True

    for raw_line in iter(process.stdout.readline, ''):
        line = redact(raw_line.rstrip())
        lines.append(line)
        log_remote(f"{prefix}{line}")
    process.stdout.close()

    try:
        returncode = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        log_error(f"Process timed out after {timeout}s")
        process.kill()
        process.wait()
        return False, lines

    return returncode == 0 and not stdin_failed, lines
