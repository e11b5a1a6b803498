"""Core record models.

Stories and characters share the same lifecycle: a client-generated id, an
immutable creation timestamp and an update timestamp refreshed on every
mutation. Pydantic validates records at every boundary (HTTP bodies, the
server's JSON file, the client's local cache).

Python attributes are snake_case; the wire and file format is camelCase, so
always dump with `to_json()` (or `by_alias=True`) when a record leaves
the process.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

EXCERPT_LENGTH = 150


def now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def derive_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    """Summarise story content for list views.

    Whitespace (paragraph breaks included) collapses to single spaces. Text
    longer than `length` is cut at the last word boundary and gets "...".
    """
    text = " ".join(content.split())
    if len(text) <= length:
        return text
    cut = text[:length]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,.;:") + "..."


class Record(BaseModel):
    """Fields common to every stored record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    created_at: str
    updated_at: str

    @field_validator("created_at", "updated_at")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        parse_timestamp(value)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> Record:
        if parse_timestamp(self.updated_at) < parse_timestamp(self.created_at):
            raise ValueError("updatedAt must not precede createdAt")
        return self

    def to_json(self) -> dict:
        """camelCase, JSON-ready dict: the shape stored on disk and sent over HTTP."""
        return self.model_dump(mode="json", by_alias=True)


class Story(Record):
    """A user-authored story. `excerpt` always mirrors `content`."""

    title: str
    content: str
    excerpt: str = ""
    cover_image: str | None = None  # URL or data: URL

    @model_validator(mode="after")
    def _derive_excerpt(self) -> Story:
        self.excerpt = derive_excerpt(self.content)
        return self

    def paragraphs(self) -> list[str]:
        return self.content.split("\n")


class Character(Record):
    """A character that can appear in stories."""

    name: str
    origin: str = ""
    birth_date: str = ""
    backstory: str = ""
    traits: list[str] = Field(default_factory=list)
    image: str | None = None
