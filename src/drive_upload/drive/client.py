import io
from dataclasses import dataclass
from typing import Any, Optional

import google.auth.exceptions
import httplib2
from google.auth.transport.requests import Request
from google.oauth2 import credentials as oauth2_credentials
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload
from loguru import logger

from ..errors import AuthenticationError, UpstreamError
from .credentials import Credentials, OAuth2Refresh

TOKEN_URI = "https://oauth2.googleapis.com/token"

# API rejections and transport faults both count as upstream failures
DRIVE_ERRORS = (
    HttpError,
    httplib2.HttpLib2Error,
    google.auth.exceptions.TransportError,
    OSError,
)


@dataclass
class DriveFile:
    """A file as reported back by ``files.create``."""

    id: str
    web_view_link: Optional[str]
    name: str


def describe_error(error: Exception) -> str:
    """Return the most useful human-readable text for a Drive or auth failure."""
    if isinstance(error, HttpError):
        reason = getattr(error, "reason", None)
        if reason:
            return str(reason)
    return str(error) or type(error).__name__


class GoogleDriveClient:
    """Client for the handful of Drive v3 calls an upload needs.

    Authentication is explicit: call ``authenticate()`` before any file
    operation so credential problems surface separately from API failures.
    """

    SCOPES = ["https://www.googleapis.com/auth/drive.file"]

    def __init__(self, credentials: Credentials, service: Any = None):
        """Initialize the client.

        Args:
            credentials: The resolved credential variant.
            service: Optional pre-built Drive service, used instead of building one.
        """
        self.credentials = credentials
        self._service = service

    @property
    def service(self) -> Any:
        if self._service is None:
            raise RuntimeError("Drive client not authenticated. Call authenticate() first.")
        return self._service

    def _google_credentials(self) -> Any:
        if isinstance(self.credentials, OAuth2Refresh):
            return oauth2_credentials.Credentials(
                token=None,
                refresh_token=self.credentials.refresh_token,
                token_uri=TOKEN_URI,
                client_id=self.credentials.client_id,
                client_secret=self.credentials.client_secret,
                scopes=self.SCOPES,
            )
        return service_account.Credentials.from_service_account_info(
            self.credentials.info, scopes=self.SCOPES
        )

    def authenticate(self) -> "GoogleDriveClient":
        """Exchange the credentials for an access token and build the Drive service.

        Raises:
            AuthenticationError: If the key material is unusable or the token
                exchange fails (network, invalid_grant, revoked token).
        """
        if self._service is not None:
            return self
        try:
            creds = self._google_credentials()
            creds.refresh(Request())
        except (ValueError, KeyError, google.auth.exceptions.GoogleAuthError) as e:
            logger.warning(f"Drive authentication failed: {describe_error(e)}")
            raise AuthenticationError(describe_error(e)) from e
        self._service = build("drive", "v3", credentials=creds, cache_discovery=False)
        return self

    def create_file(self, metadata: dict, content: bytes) -> DriveFile:
        """Upload ``content`` as a new file described by ``metadata``.

        Args:
            metadata: Drive file resource, at least ``name`` and ``mimeType``;
                may carry ``parents``.
            content: Raw file bytes.

        Returns:
            The created file's id, view link and stored name.

        Raises:
            UpstreamError: If the API request fails.
        """
        media = MediaIoBaseUpload(
            io.BytesIO(content),
            mimetype=metadata.get("mimeType", "application/octet-stream"),
            resumable=False,
        )
        try:
            created = (
                self.service.files()
                .create(
                    body=metadata,
                    media_body=media,
                    fields="id, webViewLink, name",
                    supportsAllDrives=True,
                )
                .execute()
            )
        except DRIVE_ERRORS as e:
            logger.exception(f"Drive API error creating {metadata.get('name')!r}: {e}")
            raise UpstreamError(describe_error(e)) from e

        return DriveFile(
            id=created["id"],
            web_view_link=created.get("webViewLink"),
            name=created.get("name", metadata.get("name", "")),
        )

    def grant_public_read(self, file_id: str) -> None:
        """Make a file readable by anyone with its link.

        Raises:
            UpstreamError: If the API request fails.
        """
        perm_body = {"role": "reader", "type": "anyone"}
        try:
            self.service.permissions().create(
                fileId=file_id, body=perm_body, supportsAllDrives=True
            ).execute()
        except DRIVE_ERRORS as e:
            logger.exception(f"Drive API error sharing {file_id}: {e}")
            raise UpstreamError(describe_error(e)) from e

    def delete_file(self, file_id: str) -> None:
        """Permanently delete a file.

        Raises:
            UpstreamError: If the API request fails.
        """
        try:
            self.service.files().delete(fileId=file_id, supportsAllDrives=True).execute()
        except DRIVE_ERRORS as e:
            logger.exception(f"Drive API error deleting {file_id}: {e}")
            raise UpstreamError(describe_error(e)) from e
