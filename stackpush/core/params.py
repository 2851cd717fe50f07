"""
Deployment parameters for stackpush.

This module defines the transient configuration of a single run and the
interactive collection step that fills it in.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional

from ..config.settings import DEFAULT_BRANCH, DEFAULT_REPO_DIR
from ..exceptions import ParameterError
from ..utils.logging import register_secret

# Prompt callable: (text, default, secret) -> entered value
PromptFn = Callable[[str, Optional[str], bool], str]


@dataclass
class DeploymentParams:
    """Connection and application settings for one deployment run."""

    repo_url: str
    token: str = field(repr=False)
    branch: str
    ssh_user: str
    ssh_host: str
    ssh_key_path: Path
    app_port: str
    repo_dir: str = DEFAULT_REPO_DIR

    @property
    def address(self) -> str:
        """SSH address string (user@host)."""
        return f"{self.ssh_user}@{self.ssh_host}"

    @property
    def remote_dir(self) -> str:
        """Absolute path of the project copy on the remote host."""
        home = "/root" if self.ssh_user == "root" else f"/home/{self.ssh_user}"
        return f"{home}/{self.repo_dir}"

    @property
    def public_url(self) -> str:
        return f"http://{self.ssh_host}"


def _require(value: str, label: str) -> str:
    if not value:
        raise ParameterError(f"{label} cannot be empty.", error_code="invalid_parameter",
                             details={"field": label})
    return value


def _plain_dir_name(value: str) -> str:
    """Accept only a single directory name, since it is joined into local and remote paths."""
    if value in ("", ".", "..") or "/" in value or "\\" in value:
        raise ParameterError(f"Repository directory must be a single directory name, got '{value}'.",
                             error_code="invalid_parameter", details={"field": "repo_dir"})
    return value


def collect_parameters(prompt: PromptFn, defaults: Optional[Dict[str, str]] = None) -> DeploymentParams:
    """Prompt for every deployment parameter, failing on the first invalid one.

    Args:
        prompt: Callable used to read each value
        defaults: Optional prompt defaults (from the config file)

    Returns:
        Populated DeploymentParams

    Raises:
        ParameterError: If a required value is empty, the key file is missing or
            the configured repository directory is not a plain name
    """
    defaults = defaults or {}
    repo_dir = _plain_dir_name(defaults.get("repo_dir", DEFAULT_REPO_DIR))

    repo_url = _require(
        prompt("Enter Git Repository URL (e.g., https://github.com/user/repo.git)",
               defaults.get("repo_url"), False).strip(),
        "Git URL",
    )
    token = _require(prompt("Enter Git Personal Access Token (PAT)", None, True).strip(), "PAT")
    register_secret(token)

    branch = prompt(f"Enter branch name (default: {DEFAULT_BRANCH})",
                    defaults.get("branch"), False).strip() or DEFAULT_BRANCH

    ssh_user = _require(
        prompt("Enter Remote SSH Username (e.g., ubuntu, ec2-user)", defaults.get("ssh_user"), False).strip(),
        "SSH Username",
    )
    ssh_host = _require(
        prompt("Enter Remote Server IP Address", defaults.get("ssh_host"), False).strip(),
        "Server IP",
    )

    key_input = prompt("Enter Path to Private SSH Key (e.g., /home/user/.ssh/key.pem)",
                       defaults.get("ssh_key"), False).strip()
    ssh_key_path = Path(key_input).expanduser()
    if not key_input or not ssh_key_path.is_file():
        raise ParameterError(f"SSH Key file not found at {key_input}.", error_code="invalid_parameter",
                             details={"field": "SSH Key"})

    app_port = _require(
        prompt("Enter Internal Container Port (e.g., 8080)", defaults.get("app_port"), False).strip(),
        "Application Port",
    )

    return DeploymentParams(
        repo_url=repo_url,
        token=token,
        branch=branch,
        ssh_user=ssh_user,
        ssh_host=ssh_host,
        ssh_key_path=ssh_key_path,
        app_port=app_port,
        repo_dir=repo_dir,
    )
