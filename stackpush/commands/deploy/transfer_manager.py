"""
File transfer management for stackpush deployments.

The remote project directory is removed before every copy so each run starts
from a clean tree. There is no incremental sync.
"""

import subprocess
from pathlib import Path

from ...exceptions import TransferError
from ...utils.logging import log_error, log_info, log_success
from ...utils.ssh_manager import SSHConnectionManager


class TransferManager:
    """Manages copying the working tree to the remote server."""

    def __init__(self, ssh: SSHConnectionManager):
        """Initialize transfer manager.

        Args:
            ssh: Connection manager for the target host
        """
        self.ssh = ssh

    def clear_remote_dir(self, remote_dir: str) -> None:
        """Remove any previous copy of the project on the remote host."""
        log_info(f"Removing previous remote copy: {remote_dir}")
        try:
            result = self.ssh.execute_remote(["rm", "-rf", remote_dir], timeout=120)
        except subprocess.TimeoutExpired:
            raise TransferError(
                f"Timed out removing remote directory {remote_dir} on {self.ssh.address}",
                error_code="ssh_timeout",
            )
        if result.returncode != 0:
            raise TransferError(
                f"Failed to remove remote directory {remote_dir}: {result.stderr.strip()}",
                error_code="remote_cleanup_failed",
            )

    def transfer_tree(self, local_dir: Path, remote_dir: str) -> None:
        """Recursively copy the local working tree to the remote directory.

        Raises:
            TransferError: If either the cleanup or the copy fails
        """
        self.clear_remote_dir(remote_dir)

        scp_cmd = self.ssh.build_scp_command(local_dir, remote_dir, recursive=True)
        log_info(f"Transferring {local_dir} -> {self.ssh.address}:{remote_dir}")
        try:
            result = subprocess.run(scp_cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError:
            raise TransferError("scp command not found. Please ensure OpenSSH is installed.",
                                error_code="scp_missing")

        if result.returncode != 0:
            error_msg = result.stderr.strip() if result.stderr else "Unknown SCP error"
            log_error(f"SCP transfer failed: {error_msg}")

            # Provide helpful error messages for common issues
            if "Permission denied" in error_msg:
                log_info("Tip: Ensure the SSH key is authorized for this user")
            elif "No space left" in error_msg:
                log_info("Tip: Free up disk space on the remote server")

            raise TransferError(f"SCP transfer failed: {error_msg}", error_code="scp_failed",
                                details={"returncode": result.returncode})

        log_success(f"Project transferred to {self.ssh.address}:{remote_dir}")
