"""
Error taxonomy for a single fetch.
"""

ERROR_PREFIX = "MyHTTP_Error"

TRANSPORT = "transport"
HTTP_STATUS = "http_status"
TOO_LARGE = "too_large"


class FetchError(Exception):
    """Base class for classified per-URL fetch failures."""

    kind = TRANSPORT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{ERROR_PREFIX}: {self.message}"


class TransportError(FetchError):
    """DNS, connection, timeout or body-read failure."""

    kind = TRANSPORT


class HTTPStatusError(FetchError):
    """Response status outside the 2xx range."""

    kind = HTTP_STATUS

    def __init__(self, status_code: int):
        super().__init__(f"Status code {status_code}")
        self.status_code = status_code


class ResponseTooLargeError(FetchError):
    """Declared Content-Length above the accepted body size."""

    kind = TOO_LARGE

    def __init__(self, threshold: int, declared_size: int):
        super().__init__(
            f"Response body above {threshold} bytes threshold: {declared_size}"
        )
        self.threshold = threshold
        self.declared_size = declared_size
