"""Tests for the middleware chain."""

import pytest

from readwise import ReadwiseClient
from readwise.exceptions import NotFoundError
from readwise.middleware import (
    ContentTypeMiddleware,
    Middleware,
    MiddlewareChain,
    RequestContext,
    ResponseContext,
    TimingMiddleware,
    UserAgentMiddleware,
    create_default_middleware_chain,
)

from tests.helpers import API, BASE_URL


class RecordingMiddleware(Middleware):
    """Appends hook calls to a shared list."""

    def __init__(self, name, events):
        self.name = name
        self.events = events

    def process_request(self, context):
        self.events.append(("request", self.name))
        return context

    def process_response(self, request, response):
        self.events.append(("response", self.name))
        return response

    def process_error(self, request, error):
        self.events.append(("error", self.name, type(error).__name__))


class FailingErrorMiddleware(Middleware):
    def process_request(self, context):
        return context

    def process_error(self, request, error):
        raise RuntimeError("hook failed")


class TestMiddlewareChain:
    """Ordering of hooks."""

    def test_requests_forward_responses_reversed(self):
        events = []
        chain = MiddlewareChain([RecordingMiddleware("a", events), RecordingMiddleware("b", events)])
        request = RequestContext(method="GET", url=f"{API}/books/1")

        chain.process_request(request)
        chain.process_response(request, ResponseContext(status_code=200))

        assert events == [("request", "a"), ("request", "b"), ("response", "b"), ("response", "a")]

    def test_error_hooks_run_past_a_failing_one(self):
        events = []
        chain = MiddlewareChain([RecordingMiddleware("a", events), FailingErrorMiddleware()])
        request = RequestContext(method="GET", url=f"{API}/books/1")

        chain.process_error(request, ValueError("boom"))

        assert events == [("error", "a", "ValueError")]

    def test_add_and_remove(self):
        chain = MiddlewareChain()
        timing = TimingMiddleware()

        chain.add(timing)
        assert len(chain) == 1
        assert chain.remove(timing) is True
        assert chain.remove(timing) is False
        assert len(chain) == 0

    def test_default_chain(self):
        request = RequestContext(method="POST", url=f"{API}/highlights", body={"highlights": []})

        request = create_default_middleware_chain("agent/1.0").process_request(request)

        assert request.headers["User-Agent"] == "agent/1.0"
        assert request.headers["Content-Type"] == "application/json"
        assert "timing_start" in request.metadata


class TestBuiltinMiddleware:
    """Behavior of the bundled middleware."""

    def test_user_agent_does_not_override(self):
        request = RequestContext(method="GET", url=API, headers={"User-Agent": "mine"})

        UserAgentMiddleware("agent/1.0").process_request(request)

        assert request.headers["User-Agent"] == "mine"

    def test_content_type_only_with_body(self):
        request = RequestContext(method="GET", url=API)

        ContentTypeMiddleware().process_request(request)

        assert "Content-Type" not in request.headers

    def test_timing_sets_elapsed(self):
        middleware = TimingMiddleware()
        request = middleware.process_request(RequestContext(method="GET", url=API))

        response = middleware.process_response(request, ResponseContext(status_code=200))

        assert response.elapsed >= 0.0


class TestClientIntegration:
    """Middleware wired into ReadwiseClient."""

    def test_custom_chain_sees_requests_and_errors(self, mock_api):
        events = []
        chain = MiddlewareChain([RecordingMiddleware("rec", events)])
        mock_api.get(f"{API}/books/1").respond(404)

        with ReadwiseClient("token", base_url=BASE_URL, middleware=chain) as client:
            with pytest.raises(NotFoundError):
                client.get_book(1)

        assert events == [("request", "rec"), ("response", "rec"), ("error", "rec", "NotFoundError")]

    def test_empty_chain_still_signs_requests(self, mock_api):
        route = mock_api.get(f"{API}/auth").respond(204)

        with ReadwiseClient("token", base_url=BASE_URL, middleware=MiddlewareChain()) as client:
            client.signed_request("/auth")

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Token token"
        assert not request.headers["User-Agent"].startswith("readwise-python/")

    def test_failing_error_hook_does_not_mask_api_error(self, mock_api):
        events = []
        chain = MiddlewareChain([RecordingMiddleware("outer", events), FailingErrorMiddleware()])
        mock_api.get(f"{API}/books/1").respond(404)

        with ReadwiseClient("token", base_url=BASE_URL, middleware=chain) as client:
            with pytest.raises(NotFoundError) as exc_info:
                client.get_book(1)

        assert exc_info.value.status_code == 404
        assert ("error", "outer", "NotFoundError") in events
