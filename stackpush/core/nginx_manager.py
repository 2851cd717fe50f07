"""
Nginx reverse proxy configuration for stackpush CLI.

This module renders the server block that forwards public port 80 traffic to
the application's internal port and installs it on the remote host.
"""

import subprocess

from ..config.settings import NGINX_CONF_PATH, NGINX_DEFAULT_SITES
from ..exceptions import ProxyConfigError
from ..utils.logging import log_error, log_info, log_success
from ..utils.remote_scripts import NGINX_APPLY_SCRIPT, NGINX_RELOAD_MARKER
from ..utils.ssh_manager import SSHConnectionManager

NGINX_SERVER_TEMPLATE = """server {{
    listen 80;
    server_name {server_name};

    location / {{
        proxy_pass http://localhost:{app_port};
        proxy_set_header Host $host;
        proxy_set_header X-Real-IP $remote_addr;
        proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;
    }}
}}
"""


def render_server_block(server_name: str, app_port: str) -> str:
    """Render the Nginx server block for the given public host and internal port."""
    return NGINX_SERVER_TEMPLATE.format(server_name=server_name, app_port=app_port)


class NginxManager:
    """Installs and activates the reverse proxy configuration."""

    def __init__(self, ssh: SSHConnectionManager, conf_path: str = NGINX_CONF_PATH):
        self.ssh = ssh
        self.conf_path = conf_path

    def configure(self, server_name: str, app_port: str) -> str:
        """Write the server block, drop default sites, test and reload Nginx.

        Returns:
            The rendered configuration

        Raises:
            ProxyConfigError: If writing, syntax-testing or reloading fails
        """
        config = render_server_block(server_name, app_port)

        log_info(f"Writing configuration file {self.conf_path}...")
        try:
            result = self.ssh.send_file_content(config, ["sudo", "tee", self.conf_path])
        except subprocess.TimeoutExpired:
            raise ProxyConfigError(
                f"Timed out writing {self.conf_path} on {self.ssh.address}",
                error_code="ssh_timeout",
            )
        if result.returncode != 0:
            raise ProxyConfigError(
                f"Failed to write {self.conf_path}: {result.stderr.strip()}",
                error_code="nginx_write_failed",
            )

        success, lines = self.ssh.execute_remote_script(
            NGINX_APPLY_SCRIPT, args=list(NGINX_DEFAULT_SITES), prefix="  "
        )
        if not success:
            for line in lines[-10:]:
                log_error(f"  {line}")
            if NGINX_RELOAD_MARKER in lines:
                message = "Nginx reload failed"
                error_code = "nginx_reload_failed"
            else:
                message = "Nginx configuration syntax test failed"
                error_code = "nginx_syntax_error"
            raise ProxyConfigError(message, error_code=error_code,
                                   details={"output_tail": lines[-10:]})

        log_success(f"Nginx proxying {server_name}:80 -> localhost:{app_port}")
        return config
