"""Pytest configuration and fixtures for Readwise client tests."""

import pytest
import respx

from readwise import ReadwiseClient

from tests.helpers import BASE_URL, make_highlight


@pytest.fixture
def mock_api():
    """Router mocking every HTTP call made through httpx."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def client():
    """Client pointed at the mocked host."""
    client = ReadwiseClient("test-token", base_url=BASE_URL)
    yield client
    client.close()


@pytest.fixture
def book_payload():
    """A book as returned by GET /books/{id}."""
    return {
        "id": 7843339,
        "title": "Quotes",
        "author": None,
        "category": "books",
        "num_highlights": 5,
        "last_highlight_at": "2021-02-20T16:28:53.900414Z",
        "updated": "2021-02-20T16:35:41.793746Z",
        "cover_image_url": "https://readwise-assets.s3.amazonaws.com/static/images/default-book-icon-7.09749d3efd49.png",
        "highlights_url": "https://readwise.io/bookreview/7843339",
        "source_url": None,
    }


@pytest.fixture
def highlight_payload():
    return make_highlight(1)
