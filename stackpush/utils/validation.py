"""
Validation utilities for stackpush CLI.

This module checks local prerequisites and the deployment manifests present
in a synced repository.
"""

import shutil
from enum import Enum
from pathlib import Path
from typing import List

from ..config.settings import COMPOSE_FILENAMES, DOCKERFILE_NAME
from ..exceptions import ManifestError, PrerequisiteError
from .logging import log_info

REQUIRED_BINARIES = ("git", "ssh", "scp")


class DeploymentMode(str, Enum):
    """How the application is built and started on the remote host."""

    COMPOSE = "compose"
    DOCKERFILE = "dockerfile"


def check_prerequisites() -> None:
    """Ensure the local binaries the pipeline shells out to are available."""
    missing = [name for name in REQUIRED_BINARIES if shutil.which(name) is None]
    if missing:
        raise PrerequisiteError(
            f"Required command(s) not found on PATH: {', '.join(missing)}",
            error_code="missing_prerequisite",
            details={"missing": missing},
        )


def find_compose_files(directory: Path) -> List[Path]:
    """Return compose files present in the directory root, in preference order."""
    return [directory / name for name in COMPOSE_FILENAMES if (directory / name).is_file()]


def verify_manifest(repo_path: Path) -> DeploymentMode:
    """Confirm the repository can be deployed and pick the deployment mode.

    A compose file selects compose mode; a lone Dockerfile selects dockerfile mode.

    Raises:
        ManifestError: If neither a Dockerfile nor a compose file exists
    """
    compose_files = find_compose_files(repo_path)
    if compose_files:
        log_info(f"Found compose file: {compose_files[0].name}")
        return DeploymentMode.COMPOSE

    if (repo_path / DOCKERFILE_NAME).is_file():
        log_info("Found Dockerfile (no compose file)")
        return DeploymentMode.DOCKERFILE

    raise ManifestError(
        "Neither Dockerfile nor docker-compose.yml found in the repository.",
        error_code="manifest_missing",
        details={"path": str(repo_path)},
    )
