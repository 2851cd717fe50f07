"""
Deploy command for stackpush.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from stackpush.cli.helpers import add_verbose_option, click_prompt
from stackpush.config.settings import HTTP_PROBE_ATTEMPTS, LOG_FILE_PREFIX, load_deployment_defaults
from stackpush.core.params import collect_parameters
from stackpush.core.pipeline import DeploymentPipeline
from stackpush.exceptions import StackpushError
from stackpush.utils.logging import (
    error_exit,
    log_info,
    log_phase,
    log_success,
    print_plain,
    start_log_file,
    stop_log_file,
)
from stackpush.utils.validation import check_prerequisites


def register_commands(cli) -> None:
    @cli.command("deploy")
    @click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
                  help="YAML file with prompt defaults (default: ./.stackpush.yml)")
    @click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path), default=Path("."),
                  show_default=True, help="Directory for the timestamped run log")
    @click.option("--probe-attempts", type=click.IntRange(min=1), default=HTTP_PROBE_ATTEMPTS,
                  show_default=True, help="HTTP probes before the public URL is declared unreachable")
    @add_verbose_option
    def deploy(config_path: Optional[Path], log_dir: Path, probe_attempts: int):
        """Interactively deploy a Git repository to a remote host.

        Prompts for the repository, access token, branch, SSH connection and
        application port, then runs every deployment stage in order. Any
        failure aborts the run with exit code 1.
        """
        log_path = start_log_file(log_dir, LOG_FILE_PREFIX)
        try:
            print_plain(f"Logging to {log_path}")
            check_prerequisites()
            defaults = load_deployment_defaults(config_path)

            log_phase("Collecting Deployment Parameters")
            params = collect_parameters(click_prompt, defaults)
            log_info(f"Repository: {params.repo_url} ({params.branch})")
            log_info(f"Target: {params.address}:{params.remote_dir}, app port {params.app_port}")

            pipeline = DeploymentPipeline(params, probe_attempts=probe_attempts)
            outcome = pipeline.run()
            if not outcome.succeeded:
                failure = outcome.failure
                error_exit(f"Deployment aborted at stage '{failure.stage}'. See {log_path} for details.")

            log_success(f"Deployment SUCCESSFUL! Application is LIVE at {params.public_url}")
        except StackpushError as exc:
            error_exit(exc.message, exit_code=exc.exit_code)
        finally:
            stop_log_file()
