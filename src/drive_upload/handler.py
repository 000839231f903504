"""The upload-and-publish request flow, independent of any web framework."""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from loguru import logger

from .drive.client import GoogleDriveClient, describe_error
from .drive.credentials import Credentials, resolve_credentials
from .errors import (
    AuthenticationError,
    ClientError,
    MethodNotAllowed,
    PublishError,
    UpstreamError,
    UploadError,
)
from .hints import hint_for
from .schemas import ErrorResponse, UploadResponse
from .settings import Settings

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

JSON_MIME_TYPE = "application/json"


@dataclass
class HandlerResponse:
    status_code: int
    body: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=lambda: dict(CORS_HEADERS))


def serialize_payload(json_data: Any) -> bytes:
    """Render the payload as the file content stored in Drive."""
    return json.dumps(json_data, indent=2, ensure_ascii=False).encode("utf-8")


def _parse_body(body: Optional[bytes]) -> Dict[str, Any]:
    try:
        payload = json.loads(body or b"")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ClientError("Invalid JSON body", details=str(e)) from e
    if not isinstance(payload, dict):
        raise ClientError("Request body must be a JSON object")

    missing = [name for name in ("jsonData", "filename") if payload.get(name) is None]
    filename = payload.get("filename")
    if filename is not None and (not isinstance(filename, str) or not filename.strip()):
        missing.append("filename")
    if missing:
        raise ClientError(
            "Missing jsonData or filename", details=f"Missing field(s): {', '.join(missing)}"
        )
    return payload


class UploadHandler:
    """Stores a JSON payload in Drive and returns a public download link.

    Stateless: settings are injected once and every call builds its own
    credentials and Drive client.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[[Credentials], GoogleDriveClient] = GoogleDriveClient,
    ):
        self.settings = settings
        self.client_factory = client_factory

    def download_link(self, file_id: str) -> str:
        return f"{self.settings.drive_base_url}/uc?export=download&id={file_id}"

    def handle(self, method: str, body: Optional[bytes] = None) -> HandlerResponse:
        """Run one request through the gate, validation, upload and publish steps."""
        method = method.upper()
        if method == "OPTIONS":
            return HandlerResponse(200)

        credentials: Optional[Credentials] = None
        try:
            if method != "POST":
                raise MethodNotAllowed(method)
            payload = _parse_body(body)
            credentials = resolve_credentials(self.settings)
            result = self._upload(credentials, payload["filename"], payload["jsonData"])
        except UploadError as e:
            return self._error_response(e, credentials)
        except Exception as e:
            logger.exception(f"Upload error: {e}")
            error = ErrorResponse(error=describe_error(e))
            return HandlerResponse(500, error.model_dump(exclude_none=True))
        return HandlerResponse(200, result.model_dump())

    def _upload(self, credentials: Credentials, filename: str, json_data: Any) -> UploadResponse:
        client = self.client_factory(credentials).authenticate()

        metadata: Dict[str, Any] = {"name": filename, "mimeType": JSON_MIME_TYPE}
        if credentials.folder_id:
            metadata["parents"] = [credentials.folder_id]

        logger.info(f"Uploading {filename}...")
        created = client.create_file(metadata, serialize_payload(json_data))
        logger.info(f"File uploaded: {created.id}")

        try:
            client.grant_public_read(created.id)
        except UpstreamError as e:
            details = self._orphan_details(client, created.id)
            raise PublishError(e.message, file_id=created.id, details=details) from e

        return UploadResponse(
            fileId=created.id,
            downloadLink=self.download_link(created.id),
            webViewLink=created.web_view_link,
            fileName=created.name,
        )

    def _orphan_details(self, client: GoogleDriveClient, file_id: str) -> str:
        details = f"File {file_id} was created but could not be made public."
        if not self.settings.delete_unpublished:
            return f"{details} It was left in place."
        try:
            client.delete_file(file_id)
        except UpstreamError as e:
            logger.warning(f"Could not delete unpublished file {file_id}: {e.message}")
            return f"{details} Deleting it also failed: {e.message}"
        logger.info(f"Deleted unpublished file {file_id}")
        return f"{details} It has been deleted."

    def _error_response(
        self, error: UploadError, credentials: Optional[Credentials]
    ) -> HandlerResponse:
        if isinstance(error, ClientError):
            logger.warning(f"Rejected request: {error.message}")
        elif not isinstance(error, (AuthenticationError, UpstreamError)):
            logger.warning(f"Server misconfigured: {error.message}")

        hint = None
        if isinstance(error, (AuthenticationError, UpstreamError)):
            hint = hint_for(error.message, credentials)
        body = ErrorResponse(error=error.message, hint=hint, details=error.details)
        return HandlerResponse(error.status_code, body.model_dump(exclude_none=True))
