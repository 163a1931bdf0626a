"""
readwise - Python client for the Readwise public API.

Supports retrieving books, plus create/read/update/delete for highlights:
- Token authentication
- Typed, immutable records (pydantic)
- Distinct errors for transport failures and bad statuses
- Request logging with token redaction
"""

from readwise.auth import auth
from readwise.client import ReadwiseClient
from readwise.models import (
    Book,
    BooksResponse,
    ClientConfig,
    Highlight,
    HighlightCreateResponse,
    HighlightsResponse,
    HTTPMethod,
    LocationType,
    NewHighlight,
)
from readwise.exceptions import (
    ReadwiseError,
    RequestError,
    TimeoutError,
    ConnectionError,
    ResponseError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    RateLimitExceeded,
    ServerError,
    InvalidHeaderError,
    DeserializationError,
    UnsupportedMethodError,
)
from readwise.logging import LogConfig, MaskStyle, RequestLogger, setup_logging
from readwise.version import __version__

__all__ = [
    # Client
    "auth",
    "ReadwiseClient",
    "ClientConfig",
    # Models
    "Book",
    "BooksResponse",
    "Highlight",
    "HighlightCreateResponse",
    "HighlightsResponse",
    "HTTPMethod",
    "LocationType",
    "NewHighlight",
    # Exceptions
    "ReadwiseError",
    "RequestError",
    "TimeoutError",
    "ConnectionError",
    "ResponseError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitExceeded",
    "ServerError",
    "InvalidHeaderError",
    "DeserializationError",
    "UnsupportedMethodError",
    # Logging
    "LogConfig",
    "MaskStyle",
    "RequestLogger",
    "setup_logging",
    "__version__",
]
