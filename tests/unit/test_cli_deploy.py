"""
Scenario tests for the deploy and render-proxy CLI commands.
"""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from stackpush.cli import cli
from stackpush.core.docker_manager import ContainerStatus

TOKEN = "ghp_supersecrettoken123"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def noop_prerequisites(monkeypatch):
    """Prevent real prerequisite checks during CLI tests."""
    monkeypatch.setattr("stackpush.cli_commands.deploy.check_prerequisites", lambda: None)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run each CLI test from an empty directory (no .stackpush.yml)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def remote(workdir):
    """Replace every collaborator that touches git, SSH or the network."""
    repo = workdir / "stackpush-app"
    repo.mkdir()
    (repo / "docker-compose.yml").write_text("services: {}\n")

    with patch("stackpush.core.pipeline.GitManager") as git_cls, \
            patch("stackpush.core.pipeline.ServerPreparer") as preparer_cls, \
            patch("stackpush.core.pipeline.TransferManager") as transfer_cls, \
            patch("stackpush.core.pipeline.DockerManager") as docker_cls, \
            patch("stackpush.core.pipeline.NginxManager") as nginx_cls, \
            patch("stackpush.core.http_probe.requests.head") as head, \
            patch("stackpush.core.http_probe.time.sleep"):
        git_cls.return_value.sync.return_value = repo
        docker_cls.return_value.deploy.return_value = [ContainerStatus("app-web-1", "Up 2 seconds")]
        nginx_cls.return_value.configure.return_value = "server {}"
        head.return_value = Mock(status_code=200)
        yield {
            "git": git_cls,
            "preparer": preparer_cls.return_value,
            "transfer": transfer_cls.return_value,
            "docker": docker_cls.return_value,
            "head": head,
        }


def _input(key_path, **overrides):
    values = {
        "repo_url": "https://github.com/example/app.git",
        "token": TOKEN,
        "branch": "",
        "ssh_user": "ec2-user",
        "ssh_host": "203.0.113.10",
        "ssh_key": str(key_path),
        "app_port": "8080",
    }
    values.update(overrides)
    order = ("repo_url", "token", "branch", "ssh_user", "ssh_host", "ssh_key", "app_port")
    return "\n".join(values[k] for k in order) + "\n"


def _log_text(directory: Path) -> str:
    logs = sorted(directory.glob("deploy_*.log"))
    assert len(logs) == 1
    return logs[0].read_text()


class TestDeployValidation:
    """Input validation aborts before any git or network activity."""

    @patch("subprocess.Popen")
    @patch("subprocess.run")
    def test_empty_git_url_exits_1(self, mock_run, mock_popen, runner, workdir):
        result = runner.invoke(cli, ["deploy", "--log-dir", str(workdir)], input="\n")

        assert result.exit_code == 1
        assert "Git URL cannot be empty" in result.output
        mock_run.assert_not_called()
        mock_popen.assert_not_called()

    @patch("subprocess.Popen")
    @patch("subprocess.run")
    def test_missing_key_exits_1(self, mock_run, mock_popen, runner, workdir):
        missing = workdir / "missing.pem"

        result = runner.invoke(cli, ["deploy", "--log-dir", str(workdir)],
                               input=_input(missing))

        assert result.exit_code == 1
        assert "SSH Key file not found" in result.output
        mock_run.assert_not_called()
        mock_popen.assert_not_called()

    def test_validation_error_is_logged_to_file(self, runner, workdir):
        runner.invoke(cli, ["deploy", "--log-dir", str(workdir)], input="\n")

        assert "Git URL cannot be empty" in _log_text(workdir)


class TestDeployRun:
    """End-to-end command behavior with mocked collaborators."""

    def test_successful_deploy(self, runner, workdir, ssh_key, remote):
        result = runner.invoke(cli, ["deploy", "--log-dir", str(workdir)], input=_input(ssh_key))

        assert result.exit_code == 0, result.output
        assert "Deployment SUCCESSFUL" in result.output
        assert "http://203.0.113.10" in result.output
        remote["git"].return_value.sync.assert_called_once_with("main")
        remote["head"].assert_called_once()

    def test_probe_non_200_exits_1(self, runner, workdir, ssh_key, remote):
        remote["head"].return_value = Mock(status_code=502)

        result = runner.invoke(cli, ["deploy", "--log-dir", str(workdir), "--probe-attempts", "2"],
                               input=_input(ssh_key))

        assert result.exit_code == 1
        assert "Could not receive HTTP 200 OK" in result.output
        assert "external-validation" in result.output
        assert remote["head"].call_count == 2
        remote["docker"].deploy.assert_called_once()

    def test_missing_manifest_exits_before_transfer(self, runner, workdir, ssh_key, remote):
        (workdir / "stackpush-app" / "docker-compose.yml").unlink()

        result = runner.invoke(cli, ["deploy", "--log-dir", str(workdir)], input=_input(ssh_key))

        assert result.exit_code == 1
        assert "manifest-verification" in result.output
        remote["transfer"].transfer_tree.assert_not_called()

    def test_token_never_written(self, runner, workdir, ssh_key, remote):
        result = runner.invoke(cli, ["deploy", "--log-dir", str(workdir), "--verbose"],
                               input=_input(ssh_key))

        assert result.exit_code == 0, result.output
        assert TOKEN not in result.output
        assert TOKEN not in _log_text(workdir)

    def test_config_defaults_are_offered(self, runner, workdir, ssh_key, remote):
        (workdir / "deploy.yml").write_text(
            "deployment:\n"
            "  repo_url: https://github.com/example/app.git\n"
            "  ssh_user: ec2-user\n"
            "  ssh_host: 203.0.113.10\n"
            f"  ssh_key: {ssh_key}\n"
            "  app_port: 8080\n"
        )
        answers = "\n".join(["", TOKEN, "", "", "", "", ""]) + "\n"

        result = runner.invoke(cli, ["deploy", "--config", str(workdir / "deploy.yml"),
                                     "--log-dir", str(workdir)], input=answers)

        assert result.exit_code == 0, result.output
        remote["preparer"].check_connectivity.assert_called_once()

    def test_untyped_stage_failure_names_stage(self, runner, workdir, ssh_key, remote):
        remote["transfer"].transfer_tree.side_effect = subprocess.TimeoutExpired("scp", 120)

        result = runner.invoke(cli, ["deploy", "--log-dir", str(workdir)], input=_input(ssh_key))

        assert result.exit_code == 1
        assert not isinstance(result.exception, subprocess.TimeoutExpired)
        assert "artifact-transfer" in result.output
        assert "artifact-transfer" in _log_text(workdir)
        remote["docker"].deploy.assert_not_called()

    def test_path_like_repo_dir_rejected(self, runner, workdir, ssh_key, remote):
        (workdir / "deploy.yml").write_text("deployment:\n  repo_dir: ../other\n")

        result = runner.invoke(cli, ["deploy", "--config", str(workdir / "deploy.yml"),
                                     "--log-dir", str(workdir)], input=_input(ssh_key))

        assert result.exit_code == 1
        assert "single directory name" in result.output
        remote["git"].assert_not_called()


class TestRenderProxy:
    """Test the render-proxy command."""

    def test_render_proxy(self, runner):
        result = runner.invoke(cli, ["render-proxy", "--host", "203.0.113.10", "--port", "8080"])

        assert result.exit_code == 0
        assert "server_name 203.0.113.10;" in result.output
        assert "proxy_pass http://localhost:8080;" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "stackpush" in result.output
