"""
Git repository management for stackpush CLI.

This module clones or updates the application repository with a personal
access token. The token only ever appears in the URL passed to git on the
command line; it is not stored in the repository's remotes.
"""

import subprocess
from pathlib import Path
from typing import List, Optional

from ..exceptions import RepositorySyncError
from ..utils.logging import log_info, log_success, redact


def build_authenticated_url(repo_url: str, token: str) -> str:
    """Insert 'user:<token>@' after the scheme of an HTTP(S) URL.

    URLs with another scheme (for example SSH) are returned unchanged.
    """
    for scheme in ("https://", "http://"):
        if repo_url.startswith(scheme):
            return f"{scheme}user:{token}@{repo_url[len(scheme):]}"
    return repo_url


class GitManager:
    """Manages the local copy of the application repository."""

    def __init__(self, repo_path: Path, repo_url: str, token: str):
        """Initialize Git manager.

        Args:
            repo_path: Local directory holding the clone
            repo_url: Repository URL without credentials
            token: Personal access token
        """
        self.repo_path = Path(repo_path)
        self.repo_url = repo_url
        self.auth_url = build_authenticated_url(repo_url, token)

    def _git(self, args: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
        """Run a git command, raising RepositorySyncError on failure."""
        cmd = ["git"] + args
        try:
            return subprocess.run(cmd, capture_output=True, text=True, check=True, cwd=cwd)
        except subprocess.CalledProcessError as e:
            stderr = redact((e.stderr or "").strip())
            command = redact(" ".join(cmd))
            raise RepositorySyncError(
                f"git command failed: {command}: {stderr}",
                error_code="git_failed",
                details={"command": command, "returncode": e.returncode},
            )

    def clone(self) -> None:
        """Clone the repository, then strip the token from the origin remote."""
        log_info(f"Cloning new repository into {self.repo_path}...")
        try:
            self.repo_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RepositorySyncError(
                f"Cannot create working directory {self.repo_path.parent}: {e}",
                error_code="workdir_failed",
            )
        self._git(["clone", self.auth_url, str(self.repo_path)])
        self._git(["remote", "set-url", "origin", self.repo_url], cwd=self.repo_path)

    def pull(self, branch: str) -> None:
        """Bring an existing clone up to date with the remote branch."""
        log_info(f"Repository already exists. Pulling latest changes from {branch}...")
        self._git(["fetch", self.auth_url, f"+refs/heads/{branch}:refs/remotes/origin/{branch}"],
                  cwd=self.repo_path)
        self.checkout(branch)
        self._git(["pull", "--ff-only", self.auth_url, branch], cwd=self.repo_path)

    def checkout(self, branch: str) -> None:
        log_info(f"Checking out branch {branch}")
        self._git(["checkout", branch], cwd=self.repo_path)

    def sync(self, branch: str) -> Path:
        """Clone or pull the repository and check out the requested branch.

        Returns:
            Path to the synced working tree
        """
        if self.repo_path.is_dir():
            self.pull(branch)
        else:
            self.clone()
        self.checkout(branch)
        log_success(f"Repository synced at {self.repo_path} ({branch})")
        return self.repo_path
