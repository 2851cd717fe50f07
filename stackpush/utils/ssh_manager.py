"""
SSH connection manager for stackpush CLI.

This module builds ssh/scp command lines for key-based access to the target
host and executes remote commands and scripts. Remote scripts are sent over
stdin and receive user-supplied values as quoted positional arguments.
"""

import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..config.settings import SSH_CONNECT_TIMEOUT
from .logging import log_info
from .streaming import execute_with_streaming


class SSHConnectionManager:
    """Runs commands and copies files on one remote host."""

    def __init__(self, username: str, server: str, key_path: Path, port: int = 22):
        """Initialize SSH connection manager.

        Args:
            username: SSH username
            server: Server hostname or IP
            key_path: Private key used for authentication
            port: SSH port
        """
        self.username = username
        self.server = server
        self.key_path = Path(key_path)
        self.port = port

    @property
    def address(self) -> str:
        return f"{self.username}@{self.server}"

    def _common_options(self) -> List[str]:
        # Host keys are not verified: first contact with a fresh server is the normal case
        return [
            "-o", "StrictHostKeyChecking=no",
            "-o", "UserKnownHostsFile=/dev/null",
            "-o", "LogLevel=ERROR",
            "-o", "BatchMode=yes",
            "-o", f"ConnectTimeout={SSH_CONNECT_TIMEOUT}",
            "-o", "ServerAliveInterval=60",
            "-o", "ServerAliveCountMax=3",
            "-i", str(self.key_path),
        ]

    def build_ssh_command(self, remote_args: Optional[Sequence[str]] = None) -> List[str]:
        """Build SSH command for the target host.

        Args:
            remote_args: Remote command words; each is shell-quoted

        Returns:
            List of command arguments
        """
        cmd = ["ssh"] + self._common_options()
        if self.port != 22:
            cmd.extend(["-p", str(self.port)])
        cmd.append(self.address)
        if remote_args:
            # ssh joins the remote words with spaces, so quote each one
            cmd.append(" ".join(shlex.quote(str(arg)) for arg in remote_args))
        return cmd

    def build_scp_command(self, source: Path, remote_path: str, recursive: bool = True) -> List[str]:
        """Build SCP command copying a local path to the target host.

        Args:
            source: Local file or directory
            remote_path: Absolute destination path on the remote host
            recursive: Copy directories recursively

        Returns:
            List of command arguments
        """
        cmd = ["scp"] + self._common_options()
        if recursive:
            cmd.append("-r")
        if self.port != 22:
            cmd.extend(["-P", str(self.port)])
        cmd.extend([str(source), f"{self.address}:{remote_path}"])
        return cmd

    def execute_remote(self, remote_args: Sequence[str],
                       timeout: Optional[int] = None) -> subprocess.CompletedProcess:
        """Execute a single remote command and capture its output.

        Args:
            remote_args: Remote command words
            timeout: Command timeout in seconds

        Returns:
            CompletedProcess result (never raises on non-zero exit)
        """
        ssh_cmd = self.build_ssh_command(remote_args)
        return subprocess.run(
            ssh_cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False
        )

    def execute_remote_script(self, script: str, args: Sequence[str] = (),
                              timeout: Optional[int] = None,
                              prefix: str = "") -> Tuple[bool, List[str]]:
        """Execute a bash script on the remote host via SSH stdin.

        Args:
            script: Script content to execute
            args: Positional arguments exposed to the script as $1..$N
            timeout: Maximum execution time in seconds
            prefix: Prefix for streamed output lines

        Returns:
            Tuple of (success, output_lines)
        """
        ssh_cmd = self.build_ssh_command(["bash", "-s", "--", *args])
        log_info(f"Running remote script on {self.address}")
        return execute_with_streaming(ssh_cmd, script=script, timeout=timeout, prefix=prefix)

    def send_file_content(self, content: str, remote_args: Sequence[str],
                          timeout: Optional[int] = 60) -> subprocess.CompletedProcess:
        """Run a remote command with content supplied on its stdin.

        Args:
            content: Text written to the remote command's stdin
            remote_args: Remote command words (for example sudo tee <path>)
            timeout: Command timeout in seconds

        Returns:
            CompletedProcess result
        """
        ssh_cmd = self.build_ssh_command(remote_args)
        return subprocess.run(
            ssh_cmd,
            input=content,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False
        )
