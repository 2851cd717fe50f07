"""
Remote Docker management for stackpush CLI.

This module tears down the previous deployment, rebuilds and starts the
application on the remote host, and reports every resulting container's
status and recent logs as a health signal.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..config.settings import HEALTH_LOG_LINES
from ..exceptions import RemoteDeploymentError
from ..utils.logging import log_error, log_info, log_success, log_warning, print_plain
from ..utils.remote_scripts import (
    CONTAINER_MARKER,
    COMPOSE_DEPLOY_SCRIPT,
    DOCKERFILE_DEPLOY_SCRIPT,
    HEALTH_MARKER,
)
from ..utils.ssh_manager import SSHConnectionManager
from ..utils.validation import DeploymentMode


@dataclass
class ContainerStatus:
    """Name, 'docker ps' status and recent log lines of one deployed container."""

    name: str
    status: str
    logs: List[str] = field(default_factory=list)

    @property
    def running(self) -> bool:
        return self.status.startswith("Up")


def parse_container_lines(lines: List[str]) -> List[ContainerStatus]:
    """Extract container statuses and their log tails from deploy script output.

    Each '[CONTAINER] name status' line opens a container; the lines following
    its '[HEALTH]' header, up to the next container, are that container's logs.
    """
    containers: List[ContainerStatus] = []
    current: Optional[ContainerStatus] = None
    in_logs = False
    for line in lines:
        if line.startswith(CONTAINER_MARKER):
            name, _, status = line[len(CONTAINER_MARKER):].strip().partition(" ")
            current = ContainerStatus(name=name, status=status.strip()) if name else None
            if current is not None:
                containers.append(current)
            in_logs = False
        elif line.startswith(HEALTH_MARKER):
            in_logs = current is not None
        elif in_logs:
            current.logs.append(line)
    return containers


class DockerManager:
    """Builds and runs the application on the remote host."""

    def __init__(self, ssh: SSHConnectionManager):
        self.ssh = ssh

    def deploy(self, remote_dir: str, mode: DeploymentMode, app_port: str,
               name: str) -> List[ContainerStatus]:
        """Replace the running application with a fresh build.

        Compose mode runs 'down' then 'up -d --build' for the whole stack.
        Dockerfile mode removes the named container, rebuilds the image and
        runs it with the application port published.

        Returns:
            Status of every container in the deployment

        Raises:
            RemoteDeploymentError: If the build/start fails or no container exists afterward
        """
        if mode == DeploymentMode.COMPOSE:
            script = COMPOSE_DEPLOY_SCRIPT
            args = [remote_dir, str(HEALTH_LOG_LINES)]
        else:
            script = DOCKERFILE_DEPLOY_SCRIPT
            args = [remote_dir, name, app_port, str(HEALTH_LOG_LINES)]

        log_info(f"Deploying in {mode.value} mode from {remote_dir}")
        success, lines = self.ssh.execute_remote_script(script, args=args, prefix="  ")
        containers = parse_container_lines(lines)

        if not success:
            for line in lines[-10:]:
                log_error(f"  {line}")
            raise RemoteDeploymentError(
                "Remote deployment failed",
                error_code="deploy_failed",
                details={"mode": mode.value, "output_tail": lines[-10:]},
            )
        if not containers:
            raise RemoteDeploymentError(
                "No containers found after deployment",
                error_code="no_containers",
                details={"mode": mode.value},
            )

        for container in containers:
            print_plain(f"  {container.name}: {container.status}")
            for log_line in container.logs:
                print_plain(f"    {log_line}")
            if not container.running:
                log_warning(f"Container {container.name} is not running ({container.status})")

        log_success(f"Deployed {len(containers)} container(s)")
        return containers
