"""
Server preparation for stackpush deployments.

This module checks SSH connectivity and prepares the remote server by
installing Docker and Nginx before the application is transferred.
"""

import subprocess

from ...config.settings import SSH_CONNECT_TIMEOUT
from ...exceptions import RemoteConnectionError, RemotePreparationError
from ...utils.logging import log_error, log_info, log_success
from ...utils.remote_scripts import SERVER_PREP_SCRIPT
from ...utils.ssh_manager import SSHConnectionManager


class ServerPreparer:
    """Prepares a remote server for running the application."""

    def __init__(self, ssh: SSHConnectionManager):
        """Initialize server preparer.

        Args:
            ssh: Connection manager for the target host
        """
        self.ssh = ssh

    def check_connectivity(self) -> None:
        """Run a no-op remote command to fail fast on bad host or credentials.

        Raises:
            RemoteConnectionError: If the SSH round-trip fails
        """
        log_info(f"Checking SSH connectivity to {self.ssh.address}...")
        try:
            result = self.ssh.execute_remote(
                ["echo", "[CONNECTIVITY] SSH connection successful on remote host."],
                timeout=SSH_CONNECT_TIMEOUT * 3,
            )
        except subprocess.TimeoutExpired:
            raise RemoteConnectionError(
                f"SSH connection to {self.ssh.address} timed out",
                error_code="ssh_timeout",
            )

        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else "unknown SSH error"
            raise RemoteConnectionError(
                f"Cannot connect to {self.ssh.address}: {stderr}",
                error_code="ssh_failed",
                details={"returncode": result.returncode},
            )
        log_success(f"SSH connection to {self.ssh.address} established")

    def prepare_server(self) -> None:
        """Install and start Docker and Nginx on the remote host.

        Re-running is harmless: the package manager and systemctl treat
        already-installed packages and already-enabled services as no-ops.

        Raises:
            RemotePreparationError: If the preparation script fails
        """
        log_info("Updating system and installing necessary dependencies...")
        log_info("This may take several minutes depending on server state and network speed...")
        success, lines = self.ssh.execute_remote_script(
            SERVER_PREP_SCRIPT,
            args=[self.ssh.username],
            prefix="  ",
        )
        if not success:
            for line in lines[-10:]:
                log_error(f"  {line}")
            raise RemotePreparationError(
                "Remote environment preparation failed",
                error_code="prep_failed",
                details={"output_tail": lines[-10:]},
            )
        log_success("Remote environment preparation complete")
