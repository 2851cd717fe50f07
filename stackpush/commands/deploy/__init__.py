"""
Remote deployment steps for stackpush.
"""

from .server_preparer import ServerPreparer
from .transfer_manager import TransferManager

__all__ = ['ServerPreparer', 'TransferManager']
