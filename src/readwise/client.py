"""Synchronous Readwise API client."""

import json
import uuid
import logging
from typing import Optional, Dict, Any, List, Sequence, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from readwise.models import (
    Book,
    BooksResponse,
    ClientConfig,
    Highlight,
    HighlightCreateResponse,
    HighlightsResponse,
    HTTPMethod,
    NewHighlight,
)
from readwise.logging import RequestLogger, LogConfig
from readwise.middleware import (
    MiddlewareChain,
    RequestContext,
    ResponseContext,
    create_default_middleware_chain,
)
from readwise.exceptions import (
    ConnectionError,
    DeserializationError,
    InvalidHeaderError,
    RequestError,
    TimeoutError,
    UnsupportedMethodError,
    error_for_status,
)

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = frozenset(
    {HTTPMethod.GET, HTTPMethod.POST, HTTPMethod.PATCH, HTTPMethod.DELETE}
)

_CREATE_RESPONSES = TypeAdapter(List[HighlightCreateResponse])


def build_authorization_header(access_token: str) -> str:
    """Return the ``Authorization`` header value for ``access_token``.

    Raises:
        InvalidHeaderError: If the token holds characters a header value
            cannot carry (control characters or non-ASCII).
    """
    for char in access_token:
        if char != "\t" and not 32 <= ord(char) < 127:
            raise InvalidHeaderError(
                f"Access token contains a character not allowed in headers: {char!r}"
            )
    return f"Token {access_token}"


class ReadwiseClient:
    """Client for the Readwise v2 API (books and highlights).

    The access token and configuration are fixed at construction. Every
    call performs exactly one signed request, except
    :meth:`create_highlights` which re-fetches the highlights it created.
    Nothing is retried.

    Example::

        with ReadwiseClient(os.environ["ACCESS_TOKEN"]) as client:
            for book in client.get_books(page=1):
                print(book.title)
    """

    API_PATH = "/api/v2"

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        config: Optional[ClientConfig] = None,
        log_config: Optional[LogConfig] = None,
        middleware: Optional[MiddlewareChain] = None,
    ) -> None:
        """Initialize the client.

        Args:
            access_token: Readwise access token.
            base_url: Overrides ``config.base_url``, e.g. for a mock server.
            timeout: Overrides ``config.timeout``.
            config: Full client configuration.
            log_config: Logging configuration.
            middleware: Middleware chain; defaults to timing, user agent
                and content type handling.
        """
        config = config or ClientConfig()
        overrides = {
            key: value
            for key, value in (("base_url", base_url), ("timeout", timeout))
            if value is not None
        }
        if overrides:
            config = ClientConfig(**{**config.model_dump(), **overrides})

        self._access_token = access_token
        self._config = config
        self.request_logger = RequestLogger(log_config)
        if middleware is None:
            middleware = create_default_middleware_chain(config.user_agent)
        self.middleware = middleware

        self._http = httpx.Client(
            timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
            verify=config.verify_ssl,
        )

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def config(self) -> ClientConfig:
        return self._config

    def __repr__(self) -> str:
        return f"ReadwiseClient(base_url={self.base_url!r})"

    def request_url(self, endpoint: str) -> str:
        """Build the absolute URL for an API endpoint such as ``/books/1``."""
        return f"{self.base_url}{self.API_PATH}{endpoint}"

    # Request signing

    @staticmethod
    def _resolve_method(method: Union[HTTPMethod, str]) -> HTTPMethod:
        if not isinstance(method, HTTPMethod):
            try:
                method = HTTPMethod(method.upper())
            except ValueError:
                raise UnsupportedMethodError(method) from None
        if method not in SUPPORTED_METHODS:
            raise UnsupportedMethodError(method.value)
        return method

    @staticmethod
    def _payload_for(method: HTTPMethod, body: Optional[Dict[str, Any]]) -> Optional[Any]:
        if method == HTTPMethod.POST:
            return body
        if method == HTTPMethod.PATCH:
            # updates travel as {"body": [fields]} but only the fields are sent
            try:
                return body["body"][0]
            except (KeyError, IndexError, TypeError) as e:
                raise ValueError(
                    "PATCH bodies must be wrapped as {'body': [fields]}"
                ) from e
        return None

    def signed_request(
        self,
        endpoint: str,
        method: Union[HTTPMethod, str] = HTTPMethod.GET,
        body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send a request signed with the access token.

        Args:
            endpoint: Path below ``/api/v2``, including any query string.
            method: One of GET, POST, PATCH or DELETE.
            body: JSON body. POST sends it as-is; PATCH expects
                ``{"body": [fields]}`` and sends ``fields``; GET and
                DELETE ignore it.

        Returns:
            The raw 2xx response.

        Raises:
            UnsupportedMethodError: For any other HTTP method.
            InvalidHeaderError: When the token cannot be sent as a header.
            RequestError: On network failure (timeout, DNS, refused, TLS).
            ResponseError: On a non-2xx status; carries ``status_code``.
        """
        method = self._resolve_method(method)
        url = self.request_url(endpoint)
        payload = self._payload_for(method, body)
        request_id = str(uuid.uuid4())[:8]

        context = RequestContext(
            method=method.value,
            url=url,
            headers={"Authorization": build_authorization_header(self._access_token)},
            body=payload,
            timeout=self._config.timeout,
            metadata={"request_id": request_id},
        )
        context = self.middleware.process_request(context)

        logged_body = None
        if payload is not None and self.request_logger.config.log_request_body:
            logged_body = json.dumps(payload, default=str)

        self.request_logger.log_request(
            method=context.method,
            url=context.url,
            headers=context.headers,
            body=logged_body,
            request_id=request_id,
        )

        try:
            response = self._send(context)
        except RequestError as e:
            self.middleware.process_error(context, e)
            self.request_logger.log_error(e, request_id=request_id)
            raise

        response_context = ResponseContext(
            status_code=response.status_code,
            headers=dict(response.headers),
        )
        response_context = self.middleware.process_response(context, response_context)

        self.request_logger.log_response(
            status_code=response.status_code,
            headers=response_context.headers,
            body=response.text,
            duration=response_context.elapsed,
            request_id=request_id,
        )

        if not response.is_success:
            error = error_for_status(
                response.status_code,
                response_body=response.text,
                headers=dict(response.headers),
            )
            self.middleware.process_error(context, error)
            raise error

        return response

    def _send(self, context: RequestContext) -> httpx.Response:
        try:
            return self._http.request(
                method=context.method,
                url=context.url,
                headers=context.headers,
                json=context.body,
                timeout=context.timeout,
            )
        except httpx.TimeoutException as e:
            raise TimeoutError(
                message=str(e) or "Request timed out",
                timeout=context.timeout,
                url=context.url,
                method=context.method,
                cause=e,
            ) from e
        except httpx.ConnectError as e:
            raise ConnectionError(
                message=str(e) or "Connection failed",
                url=context.url,
                method=context.method,
                cause=e,
            ) from e
        except httpx.TransportError as e:
            raise RequestError(
                message=str(e) or type(e).__name__,
                url=context.url,
                method=context.method,
                cause=e,
            ) from e

    @staticmethod
    def _decode(response: httpx.Response, schema: Any) -> Any:
        adapter = schema if isinstance(schema, TypeAdapter) else TypeAdapter(schema)
        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            raise DeserializationError(
                f"Unexpected response from {response.request.url.path}: "
                f"{e.error_count()} validation error(s)",
                response_body=response.text[:500],
                cause=e,
            ) from e

    # Books

    def get_books_page(self, page: int = 1) -> BooksResponse:
        """Fetch one page of books with its pagination envelope."""
        response = self.signed_request(f"/books?page={page}", HTTPMethod.GET)
        return self._decode(response, BooksResponse)

    def get_books(self, page: int = 1) -> List[Book]:
        """Fetch all books from a specified page, in server order.

        Only the requested page is fetched; ask for ``page + 1`` while
        :meth:`get_books_page` reports a ``next`` page.
        """
        return list(self.get_books_page(page).results)

    def get_book(self, book_id: int) -> Book:
        """Fetch a single book by ID."""
        response = self.signed_request(f"/books/{book_id}", HTTPMethod.GET)
        return self._decode(response, Book)

    # Highlights

    def get_highlights_page(self, page: int = 1) -> HighlightsResponse:
        """Fetch one page of highlights with its pagination envelope."""
        response = self.signed_request(f"/highlights?page={page}", HTTPMethod.GET)
        return self._decode(response, HighlightsResponse)

    def get_highlights(self, page: int = 1) -> List[Highlight]:
        """Fetch all highlights from a specified page, in server order."""
        return list(self.get_highlights_page(page).results)

    def get_highlight(self, highlight_id: int) -> Highlight:
        """Fetch a single highlight by ID."""
        response = self.signed_request(f"/highlights/{highlight_id}", HTTPMethod.GET)
        return self._decode(response, Highlight)

    def create_highlights(
        self,
        highlights: Sequence[Union[NewHighlight, Dict[str, Any]]],
    ) -> List[Highlight]:
        """Create one or more highlights and return them.

        The create endpoint only answers with the ids it touched, so every
        id is fetched again, one request at a time, in the order the
        server listed them. If any of those fetches fails the error
        propagates and no highlights are returned.
        """
        items = [
            item.to_payload() if isinstance(item, NewHighlight) else dict(item)
            for item in highlights
        ]
        response = self.signed_request("/highlights", HTTPMethod.POST, {"highlights": items})
        touched: List[HighlightCreateResponse] = self._decode(response, _CREATE_RESPONSES)

        ids = [hid for record in touched for hid in record.modified_highlights]
        logger.debug(
            "Created highlights touched %d book(s) and %d highlight(s)", len(touched), len(ids)
        )
        return [self.get_highlight(hid) for hid in ids]

    def update_highlight(self, highlight_id: int, fields: Dict[str, Any]) -> Highlight:
        """Update a single highlight and return it."""
        response = self.signed_request(
            f"/highlights/{highlight_id}",
            HTTPMethod.PATCH,
            {"body": [dict(fields)]},
        )
        return self._decode(response, Highlight)

    def delete_highlight(self, highlight_id: int) -> None:
        """Delete a single highlight."""
        self.signed_request(f"/highlights/{highlight_id}", HTTPMethod.DELETE)

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()

    def __enter__(self) -> "ReadwiseClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
