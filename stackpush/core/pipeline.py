"""
Deployment pipeline orchestration for stackpush CLI.

The pipeline is a fixed, linear chain of stages. Each stage either completes
or raises a typed StageError; the first failure ends the chain and becomes the
run's reported cause. An interrupt or any other exception escaping a stage is
recorded the same way, wrapped in a StageError for that stage.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..config.settings import HTTP_PROBE_ATTEMPTS
from ..commands.deploy import ServerPreparer, TransferManager
from ..exceptions import StageError
from ..utils.logging import log_error, log_phase
from ..utils.ssh_manager import SSHConnectionManager
from ..utils.validation import DeploymentMode, verify_manifest
from .docker_manager import ContainerStatus, DockerManager
from .git_manager import GitManager
from .http_probe import probe_url
from .nginx_manager import NginxManager
from .params import DeploymentParams


@dataclass
class StageResult:
    """Outcome of a single pipeline stage."""

    stage: str
    ok: bool
    error: Optional[StageError] = None


@dataclass
class PipelineResult:
    """Ordered stage outcomes for one run."""

    results: List[StageResult] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return bool(self.results) and all(r.ok for r in self.results)

    @property
    def failure(self) -> Optional[StageResult]:
        return next((r for r in self.results if not r.ok), None)


class DeploymentPipeline:
    """Runs the deployment stages in order for one set of parameters."""

    def __init__(self, params: DeploymentParams, workdir: Optional[Path] = None,
                 probe_attempts: int = HTTP_PROBE_ATTEMPTS):
        self.params = params
        self.workdir = Path(workdir) if workdir else Path.cwd()
        self.probe_attempts = probe_attempts

        self.ssh = SSHConnectionManager(params.ssh_user, params.ssh_host, params.ssh_key_path)
        self.git = GitManager(self.workdir / params.repo_dir, params.repo_url, params.token)
        self.preparer = ServerPreparer(self.ssh)
        self.transfer = TransferManager(self.ssh)
        self.docker = DockerManager(self.ssh)
        self.nginx = NginxManager(self.ssh)

        self.repo_path: Optional[Path] = None
        self.mode: Optional[DeploymentMode] = None
        self.containers: List[ContainerStatus] = []
        self.proxy_config: Optional[str] = None

    def stages(self) -> List[Tuple[str, str, Callable[[], None]]]:
        """Return (stage id, description, callable) in execution order."""
        return [
            ("repository-sync", "Authenticating and preparing repository", self.sync_repository),
            ("manifest-verification", "Checking for deployment files", self.verify_manifest),
            ("connectivity-check", f"Establishing SSH connection to {self.params.ssh_host}",
             self.preparer.check_connectivity),
            ("remote-preparation", "Preparing remote environment", self.preparer.prepare_server),
            ("artifact-transfer", "Transferring project directory to remote host", self.transfer_artifacts),
            ("remote-deployment", "Deploying application containers", self.deploy_containers),
            ("proxy-configuration", "Configuring Nginx reverse proxy", self.configure_proxy),
            ("external-validation", "Final deployment validation", self.validate),
        ]

    def sync_repository(self) -> None:
        self.repo_path = self.git.sync(self.params.branch)

    def verify_manifest(self) -> None:
        self.mode = verify_manifest(self.repo_path)

    def transfer_artifacts(self) -> None:
        self.transfer.transfer_tree(self.repo_path, self.params.remote_dir)

    def deploy_containers(self) -> None:
        self.containers = self.docker.deploy(
            self.params.remote_dir, self.mode, self.params.app_port, self.params.repo_dir
        )

    def configure_proxy(self) -> None:
        self.proxy_config = self.nginx.configure(self.params.ssh_host, self.params.app_port)

    def validate(self) -> None:
        probe_url(self.params.public_url, attempts=self.probe_attempts)

    def run(self) -> PipelineResult:
        """Execute every stage, stopping at the first failure or interrupt."""
        outcome = PipelineResult()
        for stage_id, description, action in self.stages():
            log_phase(description)
            try:
                action()
            except StageError as e:
                log_error(f"Stage '{e.stage}' failed: {e.message}")
                outcome.results.append(StageResult(stage_id, False, e))
                return outcome
            except KeyboardInterrupt:
                error = StageError("Interrupted by user", error_code="interrupted", stage=stage_id)
                log_error(f"Stage '{stage_id}' interrupted")
                outcome.results.append(StageResult(stage_id, False, error))
                return outcome
            except Exception as e:
                error = StageError(
                    f"Unexpected {type(e).__name__}: {e}",
                    error_code="unexpected_error",
                    details={"exception": type(e).__name__},
                    stage=stage_id,
                )
                log_error(f"Stage '{stage_id}' failed: {error.message}")
                outcome.results.append(StageResult(stage_id, False, error))
                return outcome
            outcome.results.append(StageResult(stage_id, True))
        return outcome
