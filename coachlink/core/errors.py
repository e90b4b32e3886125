"""Client error types.

Every failure inside coachlink is expressed as one of these types. Services
catch them at their boundary and hand them back inside an OperationResult
instead of raising.

Standard error codes:
- FEATURE_UNAVAILABLE: Operation is intentionally disabled
- STORAGE_ACCESS: Local key-value store read/write failed
- NETWORK: Remote API call failed (transport error or non-2xx status)
"""


class CoachlinkError(Exception):
    """Base exception for coachlink errors.

    Attributes:
        code: Stable error code
        message: Human-readable message
    """

    code = "COACHLINK_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FeatureUnavailableError(CoachlinkError):
    """Raised when an operation is intentionally disabled."""

    code = "FEATURE_UNAVAILABLE"


class StorageAccessError(CoachlinkError):
    """Raised when the local store cannot be read or written.

    Attributes:
        key: Store key involved, if any
    """

    code = "STORAGE_ACCESS"

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class NetworkError(CoachlinkError):
    """Raised when a remote API call fails.

    Attributes:
        status_code: HTTP status code, None for transport failures
        path: Request path
    """

    code = "NETWORK"

    def __init__(self, message: str, status_code: int | None = None, path: str | None = None) -> None:
        self.status_code = status_code
        self.path = path
        super().__init__(message)
