import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_REDIRECT_URI = "http://localhost:3000/oauth2callback"

# first name wins; the GOOGLE_* spellings are what older deployments used
_ENV_NAMES = {
    "service_account_json": ("SERVICE_ACCOUNT_JSON", "GOOGLE_SERVICE_ACCOUNT"),
    "destination_folder_id": ("DESTINATION_FOLDER_ID",),
    "oauth_client_id": ("OAUTH_CLIENT_ID", "GOOGLE_CLIENT_ID"),
    "oauth_client_secret": ("OAUTH_CLIENT_SECRET", "GOOGLE_CLIENT_SECRET"),
    "oauth_redirect_uri": ("OAUTH_REDIRECT_URI", "GOOGLE_REDIRECT_URI"),
    "oauth_refresh_token": ("OAUTH_REFRESH_TOKEN", "GOOGLE_REFRESH_TOKEN"),
    "drive_base_url": ("DRIVE_BASE_URL",),
    "delete_unpublished": ("DELETE_UNPUBLISHED",),
    "upload_route": ("UPLOAD_ROUTE",),
}


class Settings(BaseModel):
    """Process-wide configuration, read once and passed to the handler."""

    service_account_json: Optional[str] = None
    destination_folder_id: Optional[str] = None

    oauth_client_id: Optional[str] = None
    oauth_client_secret: Optional[str] = None
    oauth_redirect_uri: str = DEFAULT_REDIRECT_URI
    oauth_refresh_token: Optional[str] = None

    drive_base_url: str = "https://drive.google.com"
    delete_unpublished: bool = True
    upload_route: str = "/api/upload-to-drive"

    model_config = {"frozen": True}


def _lookup(env: Mapping[str, str], names: tuple) -> Optional[str]:
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``environ`` (defaults to ``os.environ``).

    Blank values count as unset, so fields fall back to their defaults.
    """
    env = os.environ if environ is None else environ
    values = {}
    for field, names in _ENV_NAMES.items():
        value = _lookup(env, names)
        if value is not None:
            values[field] = value
    if "drive_base_url" in values:
        values["drive_base_url"] = values["drive_base_url"].rstrip("/")
    return Settings(**values)


settings = load_settings()
