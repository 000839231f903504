"""Google Drive access."""

from .client import DriveFile, GoogleDriveClient
from .credentials import (
    Credentials,
    OAuth2Refresh,
    ServiceAccount,
    ServiceAccountWithFolder,
    resolve_credentials,
)

__all__ = [
    "Credentials",
    "DriveFile",
    "GoogleDriveClient",
    "OAuth2Refresh",
    "ServiceAccount",
    "ServiceAccountWithFolder",
    "resolve_credentials",
]
