"""
External reachability check for stackpush CLI.

The probe runs from the orchestrating machine against the public address, so
it exercises the firewall, Nginx and the application together.
"""

import time

import requests

from ..config.settings import HTTP_PROBE_ATTEMPTS, HTTP_PROBE_INTERVAL, HTTP_PROBE_TIMEOUT
from ..exceptions import ValidationError
from ..utils.logging import log_info, log_warning


def probe_url(url: str, attempts: int = HTTP_PROBE_ATTEMPTS,
              interval: float = HTTP_PROBE_INTERVAL,
              timeout: float = HTTP_PROBE_TIMEOUT) -> int:
    """Send HEAD requests until one returns HTTP 200.

    Args:
        url: URL to probe
        attempts: Maximum number of requests
        interval: Seconds to wait between requests
        timeout: Per-request timeout in seconds

    Returns:
        The final status code (always 200)

    Raises:
        ValidationError: If no attempt returned 200
    """
    last_result = "no response"
    for attempt in range(1, attempts + 1):
        try:
            response = requests.head(url, timeout=timeout, allow_redirects=False)
            if response.status_code == 200:
                log_info(f"{url} answered HTTP 200 (attempt {attempt}/{attempts})")
                return response.status_code
            last_result = f"HTTP {response.status_code}"
        except requests.RequestException as e:
            last_result = str(e)

        log_warning(f"Probe {attempt}/{attempts} of {url} failed: {last_result}")
        if attempt < attempts:
            time.sleep(interval)

    raise ValidationError(
        f"Could not receive HTTP 200 OK from {url} ({last_result}). Check logs.",
        error_code="probe_failed",
        details={"url": url, "last_result": last_result, "attempts": attempts},
    )
