"""
Custom exception hierarchy for stackpush.

These exceptions allow the pipeline and command layers to communicate
structured failure information without duplicating logging or exit logic.
Each deployment stage raises its own ``StageError`` subclass so a failed run
reports a typed cause rather than a bare line number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StackpushError(Exception):
    """Base exception carrying structured error metadata."""

    message: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    exit_code: int = 1

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class ParameterError(StackpushError):
    """Raised when a deployment parameter is empty or invalid."""


class PrerequisiteError(StackpushError):
    """Raised when a required local binary is missing."""


@dataclass
class StageError(StackpushError):
    """Raised when an external command fails during a pipeline stage."""

    stage: str = "unknown"


@dataclass
class RepositorySyncError(StageError):
    stage: str = "repository-sync"


@dataclass
class ManifestError(StageError):
    stage: str = "manifest-verification"


@dataclass
class RemoteConnectionError(StageError):
    stage: str = "connectivity-check"


@dataclass
class RemotePreparationError(StageError):
    stage: str = "remote-preparation"


@dataclass
class TransferError(StageError):
    stage: str = "artifact-transfer"


@dataclass
class RemoteDeploymentError(StageError):
    stage: str = "remote-deployment"


@dataclass
class ProxyConfigError(StageError):
    stage: str = "proxy-configuration"


@dataclass
class ValidationError(StageError):
    stage: str = "external-validation"
