"""Credential variants and their resolution from settings."""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ..errors import ConfigurationError, InvalidCredentialFormat

if TYPE_CHECKING:
    from ..settings import Settings


@dataclass(frozen=True)
class ServiceAccount:
    """A service account key document."""

    info: Dict[str, Any]

    @property
    def identity(self) -> Optional[str]:
        return self.info.get("client_email")

    @property
    def folder_id(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class ServiceAccountWithFolder(ServiceAccount):
    """A service account that uploads into a folder shared with it."""

    destination_folder_id: str = ""

    @property
    def folder_id(self) -> Optional[str]:
        return self.destination_folder_id


@dataclass(frozen=True)
class OAuth2Refresh:
    """A user's OAuth2 client plus a long-lived refresh token."""

    client_id: str
    client_secret: str
    redirect_uri: str
    refresh_token: str

    @property
    def identity(self) -> Optional[str]:
        return None

    @property
    def folder_id(self) -> Optional[str]:
        return None


Credentials = Union[ServiceAccount, ServiceAccountWithFolder, OAuth2Refresh]

_OAUTH_VARS = {
    "oauth_client_id": "OAUTH_CLIENT_ID",
    "oauth_client_secret": "OAUTH_CLIENT_SECRET",
    "oauth_refresh_token": "OAUTH_REFRESH_TOKEN",
}


def _parse_service_account(raw: str) -> Dict[str, Any]:
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidCredentialFormat(f"SERVICE_ACCOUNT_JSON is not valid JSON: {e.msg}") from e
    if not isinstance(info, dict):
        raise InvalidCredentialFormat("SERVICE_ACCOUNT_JSON must be a JSON object")
    return info


def resolve_credentials(settings: "Settings") -> Credentials:
    """Select the active credential variant.

    A service account takes precedence over OAuth2 values when both are
    configured.

    Raises:
        InvalidCredentialFormat: If the service account document is unparsable.
        ConfigurationError: If no variant is fully configured.
    """
    if settings.service_account_json:
        info = _parse_service_account(settings.service_account_json)
        if settings.destination_folder_id:
            return ServiceAccountWithFolder(
                info=info, destination_folder_id=settings.destination_folder_id
            )
        return ServiceAccount(info=info)

    missing = [env for field, env in _OAUTH_VARS.items() if not getattr(settings, field)]
    if not missing:
        return OAuth2Refresh(
            client_id=settings.oauth_client_id,  # type: ignore[arg-type]
            client_secret=settings.oauth_client_secret,  # type: ignore[arg-type]
            redirect_uri=settings.oauth_redirect_uri,
            refresh_token=settings.oauth_refresh_token,  # type: ignore[arg-type]
        )

    if len(missing) < len(_OAUTH_VARS):
        raise ConfigurationError(
            "Server not configured. Incomplete OAuth2 credentials.",
            details=f"Missing environment variables: {', '.join(missing)}",
        )
    raise ConfigurationError(
        "Server not configured. No Google Drive credentials found.",
        details=(
            "Set SERVICE_ACCOUNT_JSON (optionally with DESTINATION_FOLDER_ID), "
            "or OAUTH_CLIENT_ID, OAUTH_CLIENT_SECRET and OAUTH_REFRESH_TOKEN"
        ),
    )
