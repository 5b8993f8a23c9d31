from typing import Optional


class BackendError(Exception):
    """Base exception for backend API errors."""
    pass


class BackendUnavailableError(BackendError):
    """The backend could not be reached (connection refused, timeout, DNS)."""
    pass


class BackendResponseError(BackendError):
    """The backend answered with an HTTP error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_server_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


class BackendPayloadError(BackendError):
    """The backend answered with a body that does not match the expected shape."""
    pass
