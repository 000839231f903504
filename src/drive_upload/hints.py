"""Best-effort remediation hints for common Drive failures."""

from typing import Optional

from .drive.credentials import Credentials, OAuth2Refresh

_PERMISSION_PATTERNS = (
    "not found",
    "notfound",
    # also covers "does not have sufficient permissions"
    "sufficient permission",
    "insufficientfilepermissions",
    "insufficientpermissions",
    "does not have permission",
    "forbidden",
)
_QUOTA_PATTERNS = (
    "storage quota",
    "storagequotaexceeded",
    "quota has been exceeded",
)
_GRANT_PATTERNS = ("invalid_grant", "token has been expired or revoked")


def _matches(text: str, patterns: tuple) -> bool:
    return any(p in text for p in patterns)


def _permission_hint(credentials: Credentials) -> str:
    if isinstance(credentials, OAuth2Refresh):
        return (
            "The authorized Google account cannot reach the destination. Check that it "
            "still has edit access to the target folder."
        )
    folder = f"folder {credentials.folder_id}" if credentials.folder_id else "folder"
    identity = credentials.identity or "<service account email>"
    return (
        f"Share the destination {folder} with the service account {identity} "
        "(Editor access), then retry."
    )


def _quota_hint(credentials: Credentials) -> str:
    if isinstance(credentials, OAuth2Refresh):
        return "The authorized Google account's Drive storage is full. Free up space and retry."
    return (
        "Service accounts have no Drive storage quota of their own. Upload into a folder "
        "on a shared drive, or switch to OAuth2 refresh-token credentials."
    )


def hint_for(message: str, credentials: Optional[Credentials]) -> Optional[str]:
    """Return a remediation hint for ``message``, or None if nothing matches."""
    if credentials is None:
        return None
    text = message.lower()
    if _matches(text, _GRANT_PATTERNS):
        return (
            "The refresh token has expired or was revoked. Run drive-upload-token to "
            "mint a new one and update OAUTH_REFRESH_TOKEN."
        )
    if _matches(text, _QUOTA_PATTERNS):
        return _quota_hint(credentials)
    if _matches(text, _PERMISSION_PATTERNS):
        return _permission_hint(credentials)
    return None
