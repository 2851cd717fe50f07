"""
Stackpush: deploy a Dockerized Git repository to a remote host over SSH.
"""

from stackpush.config.settings import VERSION

__version__ = VERSION
