"""Pydantic models for Readwise configuration and API records."""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from readwise.version import __version__

DEFAULT_BASE_URL = "https://readwise.io"


class HTTPMethod(str, Enum):
    """HTTP methods."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class LocationType(str, Enum):
    """How a highlight's location is measured."""
    PAGE = "page"
    ORDER = "order"
    LOCATION = "location"
    TIME_OFFSET = "time_offset"
    OFFSET = "offset"


class ClientConfig(BaseModel):
    """Configuration for the Readwise client."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Readwise host, without /api/v2")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    connect_timeout: float = Field(default=5.0, gt=0, description="Connection timeout")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(default=f"readwise-python/{__version__}")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base_url doesn't end with slash."""
        return v.rstrip("/")


class Record(BaseModel):
    """Immutable value decoded from a Readwise payload."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Book(Record):
    """A source document in the user's library."""

    id: int
    title: str
    author: Optional[str] = None
    category: str = ""
    num_highlights: int = 0
    last_highlight_at: Optional[datetime] = None
    updated: Optional[datetime] = None
    cover_image_url: str = ""
    highlights_url: str = ""
    source_url: Optional[str] = None


class Highlight(Record):
    """A passage captured from a book."""

    id: int
    text: str
    note: str = ""
    location: Optional[int] = None
    # the server may send values outside LocationType; those stay plain strings
    location_type: Union[LocationType, str] = Field(
        default=LocationType.ORDER, union_mode="left_to_right"
    )
    highlighted_at: Optional[datetime] = None
    url: Optional[str] = None
    color: str = ""
    updated: Optional[datetime] = None
    book_id: Optional[int] = None


class BooksResponse(Record):
    """One page of books."""

    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[Book] = Field(default_factory=list)


class HighlightsResponse(Record):
    """One page of highlights."""

    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[Highlight] = Field(default_factory=list)


class HighlightCreateResponse(Book):
    """A book touched by a create call, with the ids of its new or changed highlights."""

    modified_highlights: List[int] = Field(default_factory=list)


class NewHighlight(BaseModel):
    """A highlight to be sent to the create endpoint.

    Readwise matches highlights to books by ``title`` and ``author``;
    without a title the highlight lands in a generic "Quotes" book.
    """

    text: str = Field(min_length=1, description="The text content of the highlight")
    title: Optional[str] = None
    author: Optional[str] = None
    source_url: Optional[str] = None
    source_type: Optional[str] = None
    category: Optional[str] = None
    note: Optional[str] = None
    location: Optional[int] = None
    location_type: Optional[LocationType] = None
    highlighted_at: Optional[datetime] = None
    highlight_url: Optional[str] = None

    def to_payload(self) -> dict:
        """Convert to the JSON object expected by the API, omitting unset fields."""
        return self.model_dump(mode="json", exclude_none=True)
