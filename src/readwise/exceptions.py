"""Custom exceptions for the Readwise client."""

from typing import Optional, Any


class ReadwiseError(Exception):
    """Base exception for all Readwise client errors."""

    def __init__(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.message = message
        super().__init__(message, *args, **kwargs)


class RequestError(ReadwiseError):
    """Raised when a request fails to reach the server."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        method: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        self.url = url
        self.method = method
        self.cause = cause
        super().__init__(message)


class TimeoutError(RequestError):
    """Raised when a request times out."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> None:
        self.timeout = timeout
        super().__init__(message, **kwargs)


class ConnectionError(RequestError):
    """Raised when the connection to the server fails (DNS, refused, TLS)."""

    pass


class ResponseError(ReadwiseError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: Optional[str] = None,
        headers: Optional[dict] = None,
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body
        self.headers = headers or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status_code})"


class AuthenticationError(ResponseError):
    """Raised when the access token is rejected."""

    def __init__(
        self,
        message: str = "Authentication failed",
        status_code: int = 401,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, status_code=status_code, **kwargs)


class AuthorizationError(ResponseError):
    """Raised when authorization fails (403)."""

    def __init__(
        self,
        message: str = "Authorization failed",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, status_code=403, **kwargs)


class NotFoundError(ResponseError):
    """Raised when a book or highlight does not exist (404)."""

    def __init__(
        self,
        message: str = "Resource not found",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, status_code=404, **kwargs)


class RateLimitExceeded(ResponseError):
    """Raised on a 429 response. The client does not retry it."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, status_code=429, **kwargs)


class ServerError(ResponseError):
    """Raised when the server returns a 5xx error."""

    pass


class InvalidHeaderError(ReadwiseError):
    """Raised when the access token cannot be used as a header value."""

    pass


class DeserializationError(ReadwiseError):
    """Raised when a response body does not match the expected shape."""

    def __init__(
        self,
        message: str,
        response_body: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        self.response_body = response_body
        self.cause = cause
        super().__init__(message)


class UnsupportedMethodError(ReadwiseError):
    """Raised for HTTP methods the Readwise API is never called with."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unsupported request method: {method}")


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Parse a Retry-After header given in seconds."""
    if not value:
        return None
    try:
        return max(0, int(float(value)))
    except ValueError:
        return None


def error_for_status(
    status_code: int,
    response_body: Optional[str] = None,
    headers: Optional[dict] = None,
) -> ResponseError:
    """Build the ResponseError matching a non-2xx status code."""
    kwargs: dict = {"response_body": response_body, "headers": headers}

    if status_code == 401:
        return AuthenticationError(**kwargs)
    if status_code == 403:
        return AuthorizationError(**kwargs)
    if status_code == 404:
        return NotFoundError(**kwargs)
    if status_code == 429:
        lowered = {k.lower(): v for k, v in (headers or {}).items()}
        retry_after = parse_retry_after(lowered.get("retry-after"))
        return RateLimitExceeded(retry_after=retry_after, **kwargs)
    if status_code >= 500:
        return ServerError(f"Server error: {status_code}", status_code=status_code, **kwargs)
    return ResponseError(f"Bad request: {status_code}", status_code=status_code, **kwargs)
