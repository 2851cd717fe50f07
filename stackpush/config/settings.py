"""
Configuration settings for stackpush CLI.

This module contains the constants used throughout the deployment pipeline and
the loader for the optional YAML file that supplies prompt defaults.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..exceptions import ParameterError

# Version information
VERSION = "1.0.0"
AUTHOR = "Stackpush Contributors"

# Parameter defaults
DEFAULT_BRANCH = "main"
DEFAULT_REPO_DIR = "stackpush-app"
DEFAULT_CONFIG_FILE = ".stackpush.yml"

# Deployment manifests recognized in the repository root
DOCKERFILE_NAME = "Dockerfile"
COMPOSE_FILENAMES = (
    "docker-compose.yml",
    "docker-compose.yaml",
    "compose.yml",
    "compose.yaml",
)

# Remote Nginx layout (dnf/yum distributions read conf.d)
NGINX_CONF_PATH = "/etc/nginx/conf.d/stackpush_proxy.conf"
NGINX_DEFAULT_SITES = (
    "/etc/nginx/conf.d/default.conf",
    "/etc/nginx/sites-enabled/default",
)

# Timeouts (seconds)
SSH_CONNECT_TIMEOUT = 10
HTTP_PROBE_TIMEOUT = 10
HTTP_PROBE_ATTEMPTS = 3
HTTP_PROBE_INTERVAL = 5

# Log file naming: <prefix>_YYYYMMDD_HHMMSS.log
LOG_FILE_PREFIX = "deploy"

# Health check: log lines shown per container
HEALTH_LOG_LINES = 5

# Keys accepted under 'deployment:' in the config file
CONFIG_KEYS = ("repo_url", "branch", "ssh_user", "ssh_host", "ssh_key", "app_port", "repo_dir")


def load_deployment_defaults(config_path: Optional[Path] = None) -> Dict[str, str]:
    """Load prompt defaults from the 'deployment' section of a YAML file.

    A missing file yields no defaults. The access token is never read from
    configuration.

    Args:
        config_path: Path to the YAML file. Defaults to ./.stackpush.yml

    Returns:
        Mapping of recognized keys to string values

    Raises:
        ParameterError: If the file exists but cannot be parsed
    """
    path = Path(config_path) if config_path else Path.cwd() / DEFAULT_CONFIG_FILE
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            cfg = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ParameterError(f"Invalid configuration file {path}: {e}", error_code="invalid_config")

    section: Any = (cfg.get("deployment") or {}) if isinstance(cfg, dict) else {}
    if not isinstance(section, dict):
        raise ParameterError(f"'deployment' in {path} must be a mapping", error_code="invalid_config")

    defaults = {}
    for key in CONFIG_KEYS:
        value = section.get(key)
        if isinstance(value, (str, int, float)) and str(value).strip():
            defaults[key] = str(value).strip()
    return defaults
