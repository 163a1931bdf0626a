"""Tests for Readwise records and configuration."""

import pytest
from pydantic import ValidationError

from readwise.models import (
    Book,
    ClientConfig,
    Highlight,
    HighlightCreateResponse,
    HighlightsResponse,
    LocationType,
    NewHighlight,
)

from tests.helpers import envelope, make_highlight


class TestRecords:
    """Decoding and immutability of API records."""

    def test_book_requires_id_and_title(self):
        with pytest.raises(ValidationError):
            Book.model_validate({"id": 1})
        with pytest.raises(ValidationError):
            Book.model_validate({"title": "Quotes"})

    def test_records_are_frozen(self):
        highlight = Highlight(id=1, text="hello")

        with pytest.raises(ValidationError):
            highlight.text = "changed"

    def test_updates_produce_new_instances(self):
        highlight = Highlight(id=1, text="hello")

        updated = highlight.model_copy(update={"note": "a note"})

        assert updated.note == "a note"
        assert highlight.note == ""

    def test_unknown_fields_are_ignored(self):
        highlight = Highlight.model_validate(make_highlight(5, tags=[{"id": 1, "name": "fav"}]))

        assert highlight.id == 5
        assert not hasattr(highlight, "tags")

    def test_location_type_values(self):
        highlight = Highlight.model_validate(make_highlight(1, location_type="time_offset"))

        assert highlight.location_type is LocationType.TIME_OFFSET

    def test_envelope_keeps_result_order(self):
        page = HighlightsResponse.model_validate(
            envelope([make_highlight(3), make_highlight(1), make_highlight(2)])
        )

        assert [h.id for h in page.results] == [3, 1, 2]

    def test_create_response_is_book_shaped(self, book_payload):
        record = HighlightCreateResponse.model_validate(
            {**book_payload, "modified_highlights": [1, 2]}
        )

        assert isinstance(record, Book)
        assert record.title == "Quotes"
        assert record.modified_highlights == [1, 2]

    def test_create_response_defaults_to_no_ids(self, book_payload):
        record = HighlightCreateResponse.model_validate(book_payload)

        assert record.modified_highlights == []


class TestNewHighlight:
    """Payloads for the create endpoint."""

    def test_payload_omits_unset_fields(self):
        assert NewHighlight(text="hello world!").to_payload() == {"text": "hello world!"}

    def test_payload_serializes_enums(self):
        payload = NewHighlight(
            text="hello", author="Marcus Aurelius", location_type=LocationType.LOCATION
        ).to_payload()

        assert payload == {"text": "hello", "author": "Marcus Aurelius", "location_type": "location"}

    def test_text_required(self):
        with pytest.raises(ValidationError):
            NewHighlight(text="")


class TestClientConfig:
    """Client configuration validation."""

    def test_defaults(self):
        config = ClientConfig()

        assert config.base_url == "https://readwise.io"
        assert config.timeout == 30.0
        assert config.connect_timeout == 5.0
        assert config.user_agent.startswith("readwise-python/")

    def test_strips_trailing_slash(self):
        assert ClientConfig(base_url="http://localhost:8000/").base_url == "http://localhost:8000"

    @pytest.mark.parametrize("timeout", [0, -1.0])
    def test_timeout_must_be_positive(self, timeout):
        with pytest.raises(ValidationError):
            ClientConfig(timeout=timeout)

    def test_frozen(self):
        config = ClientConfig()

        with pytest.raises(ValidationError):
            config.base_url = "https://example.com"
