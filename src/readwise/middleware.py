"""Request/response hooks run around every signed request."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import time
import logging

logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """A request about to be sent."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Any] = None
    timeout: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    start_time: float = 0.0

    def __post_init__(self):
        if self.start_time == 0.0:
            self.start_time = time.time()


@dataclass
class ResponseContext:
    """A response as seen by middleware."""

    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    elapsed: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)


class Middleware(ABC):
    """Base middleware interface."""

    @abstractmethod
    def process_request(self, context: RequestContext) -> RequestContext:
        """Return the (possibly modified) request context."""

    def process_response(
        self,
        request: RequestContext,
        response: ResponseContext,
    ) -> ResponseContext:
        """Return the (possibly modified) response context."""
        return response

    def process_error(
        self,
        request: RequestContext,
        error: Exception,
    ) -> None:
        """Observe a failed request. Exceptions raised here are logged and dropped."""


class MiddlewareChain:
    """Ordered list of middleware.

    Requests pass through in insertion order, responses and errors in
    reverse order.
    """

    def __init__(self, middleware: Optional[List[Middleware]] = None) -> None:
        self._middleware: List[Middleware] = list(middleware or [])

    def __len__(self) -> int:
        return len(self._middleware)

    def add(self, middleware: Middleware) -> "MiddlewareChain":
        self._middleware.append(middleware)
        return self

    def remove(self, middleware: Middleware) -> bool:
        try:
            self._middleware.remove(middleware)
            return True
        except ValueError:
            return False

    def process_request(self, context: RequestContext) -> RequestContext:
        for mw in self._middleware:
            context = mw.process_request(context)
        return context

    def process_response(
        self,
        request: RequestContext,
        response: ResponseContext,
    ) -> ResponseContext:
        for mw in reversed(self._middleware):
            response = mw.process_response(request, response)
        return response

    def process_error(
        self,
        request: RequestContext,
        error: Exception,
    ) -> None:
        for mw in reversed(self._middleware):
            try:
                mw.process_error(request, error)
            except Exception:
                # the original error must reach the caller
                logger.debug(
                    "%s.process_error raised while handling %s",
                    type(mw).__name__,
                    type(error).__name__,
                    exc_info=True,
                )


class TimingMiddleware(Middleware):
    """Records wall-clock duration on the response."""

    def process_request(self, context: RequestContext) -> RequestContext:
        context.metadata["timing_start"] = time.time()
        return context

    def process_response(
        self,
        request: RequestContext,
        response: ResponseContext,
    ) -> ResponseContext:
        start = request.metadata.get("timing_start", request.start_time)
        response.elapsed = time.time() - start
        return response


class UserAgentMiddleware(Middleware):
    """Sets the User-Agent header unless the caller already did."""

    def __init__(self, user_agent: str) -> None:
        self.user_agent = user_agent

    def process_request(self, context: RequestContext) -> RequestContext:
        context.headers.setdefault("User-Agent", self.user_agent)
        return context


class ContentTypeMiddleware(Middleware):
    """Marks requests that carry a body as JSON."""

    def __init__(self, default_content_type: str = "application/json") -> None:
        self.default_content_type = default_content_type

    def process_request(self, context: RequestContext) -> RequestContext:
        if context.body is not None:
            context.headers.setdefault("Content-Type", self.default_content_type)
        return context

    def process_response(
        self,
        request: RequestContext,
        response: ResponseContext,
    ) -> ResponseContext:
        content_type = response.headers.get("content-type", "")
        response.metadata["is_json"] = "application/json" in content_type
        return response


def create_default_middleware_chain(user_agent: str) -> MiddlewareChain:
    """Create the chain every client starts with."""
    return MiddlewareChain([
        TimingMiddleware(),
        UserAgentMiddleware(user_agent),
        ContentTypeMiddleware(),
    ])
