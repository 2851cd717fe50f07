"""
Unit tests for Nginx reverse proxy rendering and installation.
"""

import re
import subprocess

import pytest

from stackpush.config.settings import NGINX_CONF_PATH, NGINX_DEFAULT_SITES
from stackpush.core.nginx_manager import NginxManager, render_server_block
from stackpush.exceptions import ProxyConfigError
from stackpush.utils.remote_scripts import NGINX_APPLY_SCRIPT


class TestRenderServerBlock:
    """Test the rendered server block."""

    @pytest.mark.parametrize("host,port", [
        ("203.0.113.10", "8080"),
        ("198.51.100.7", "3000"),
        ("app.example.com", "5000"),
    ])
    def test_targets_match_inputs(self, host, port):
        config = render_server_block(host, port)

        assert re.findall(r"server_name (\S+);", config) == [host]
        assert re.findall(r"proxy_pass http://localhost:(\S+);", config) == [port]

    def test_listens_on_80_and_forwards_headers(self):
        config = render_server_block("203.0.113.10", "8080")

        assert "listen 80;" in config
        assert "proxy_set_header Host $host;" in config
        assert "proxy_set_header X-Real-IP $remote_addr;" in config
        assert "proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;" in config

    def test_braces_balanced(self):
        config = render_server_block("203.0.113.10", "8080")
        assert config.count("{") == config.count("}") == 2


class TestNginxApplyScript:
    """Test the remote activation script."""

    def test_syntax_test_precedes_reload(self):
        assert NGINX_APPLY_SCRIPT.index("nginx -t") < NGINX_APPLY_SCRIPT.index("systemctl reload nginx")
        assert "set -euo pipefail" in NGINX_APPLY_SCRIPT


class TestNginxManager:
    """Test NginxManager.configure with a mocked SSH connection."""

    def test_configure_success(self, mock_ssh, completed):
        mock_ssh.send_file_content.return_value = completed(0)
        mock_ssh.execute_remote_script.return_value = (True, [
            "[NGINX] Testing configuration syntax...",
            "nginx: configuration file /etc/nginx/nginx.conf test is successful",
            "[NGINX] Reloading nginx...",
        ])

        config = NginxManager(mock_ssh).configure("203.0.113.10", "8080")

        assert config == render_server_block("203.0.113.10", "8080")
        content, remote_args = mock_ssh.send_file_content.call_args.args
        assert content == config
        assert remote_args == ["sudo", "tee", NGINX_CONF_PATH]
        assert mock_ssh.execute_remote_script.call_args.kwargs["args"] == list(NGINX_DEFAULT_SITES)

    def test_write_failure(self, mock_ssh, completed):
        mock_ssh.send_file_content.return_value = completed(1, stderr="sudo: a password is required")

        with pytest.raises(ProxyConfigError, match="Failed to write"):
            NginxManager(mock_ssh).configure("203.0.113.10", "8080")

        mock_ssh.execute_remote_script.assert_not_called()

    def test_syntax_failure(self, mock_ssh, completed):
        mock_ssh.send_file_content.return_value = completed(0)
        mock_ssh.execute_remote_script.return_value = (False, [
            "[NGINX] Testing configuration syntax...",
            "nginx: [emerg] unexpected \"}\" in /etc/nginx/conf.d/stackpush_proxy.conf:9",
        ])

        with pytest.raises(ProxyConfigError, match="syntax test failed") as exc_info:
            NginxManager(mock_ssh).configure("203.0.113.10", "8080")

        assert exc_info.value.error_code == "nginx_syntax_error"
        assert exc_info.value.stage == "proxy-configuration"

    def test_reload_failure(self, mock_ssh, completed):
        mock_ssh.send_file_content.return_value = completed(0)
        mock_ssh.execute_remote_script.return_value = (False, [
            "[NGINX] Testing configuration syntax...",
            "[NGINX] Reloading nginx...",
            "Job for nginx.service failed.",
        ])

        with pytest.raises(ProxyConfigError, match="reload failed"):
            NginxManager(mock_ssh).configure("203.0.113.10", "8080")

    def test_write_timeout(self, mock_ssh):
        mock_ssh.send_file_content.side_effect = subprocess.TimeoutExpired("ssh", 60)

        with pytest.raises(ProxyConfigError, match="Timed out writing") as exc_info:
            NginxManager(mock_ssh).configure("203.0.113.10", "8080")

        assert exc_info.value.error_code == "ssh_timeout"
        assert exc_info.value.stage == "proxy-configuration"
        mock_ssh.execute_remote_script.assert_not_called()
