"""Payload builders and URLs shared by the test modules."""

BASE_URL = "https://readwise.test"
API = f"{BASE_URL}/api/v2"


def make_highlight(highlight_id, text="hello world!", **overrides):
    """Build a highlight payload as returned by GET /highlights/{id}."""
    payload = {
        "id": highlight_id,
        "text": text,
        "note": "",
        "location": 1,
        "location_type": "order",
        "highlighted_at": None,
        "url": None,
        "color": "",
        "updated": "2021-02-20T16:35:41.793746Z",
        "book_id": 7843339,
        "tags": [],
    }
    payload.update(overrides)
    return payload


def envelope(results, next_url=None):
    """Wrap records in the paginated list envelope."""
    return {"count": len(results), "next": next_url, "previous": None, "results": results}
