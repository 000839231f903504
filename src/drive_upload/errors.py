"""Error taxonomy for the upload flow.

Every failure the handler reports is an ``UploadError`` carrying the HTTP
status it maps to. Anything else reaching the handler is treated as a 500.
"""

from typing import Optional


class UploadError(Exception):
    """Base class for failures reported to the caller."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ClientError(UploadError):
    """Malformed or incomplete request."""

    status_code = 400


class MethodNotAllowed(ClientError):
    status_code = 405

    def __init__(self, method: str):
        super().__init__("Method not allowed", details=f"{method} is not supported")
        self.method = method


class ConfigurationError(UploadError):
    """Deployment configuration is absent or unusable (operator fault)."""


class InvalidCredentialFormat(ConfigurationError):
    def __init__(self, details: Optional[str] = None):
        super().__init__("Invalid credentials format", details=details)


class AuthenticationError(UploadError):
    """Exchanging credentials for an access token failed."""


class UpstreamError(UploadError):
    """A Drive call failed after authentication succeeded."""


class PublishError(UpstreamError):
    """The file was created but could not be made public."""

    def __init__(self, message: str, file_id: str, details: Optional[str] = None):
        super().__init__(message, details=details)
        self.file_id = file_id
