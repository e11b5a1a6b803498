"""Form submission path for stories and characters.

A submission validates the user's input, builds a new record (or a revision
of an existing one), applies it to the cache optimistically and mirrors it to
the server. The returned Submission carries the sync status so the caller can
tell "saved" from "saved locally only".
"""

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from .cache import RecordCache, SyncStatus
from .models import Character, Record, Story
from .records import new_character, new_story, revise_character, revise_story


class FormError(ValueError):
    """User-facing validation error."""


@dataclass
class Submission:
    record: Record
    status: SyncStatus

    @property
    def confirmed(self) -> bool:
        return self.status is SyncStatus.CONFIRMED


def image_data_url(path: Path) -> str:
    """Inline an image file as a data: URL for storage on the record."""
    mime, _ = mimetypes.guess_type(path.name)
    if not mime or not mime.startswith("image/"):
        raise FormError("Please select an image file")
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def _require(value: str, label: str) -> None:
    if not value.strip():
        raise FormError(f"{label} is required")


def _parse_traits(traits: list[str] | str | None) -> list[str]:
    if traits is None:
        return []
    if isinstance(traits, str):
        traits = traits.split(",")
    return [t.strip() for t in traits if t.strip()]


async def submit_story(
    cache: RecordCache[Story],
    *,
    title: str,
    content: str,
    cover_image: str | None = None,
    story: Story | None = None,
) -> Submission:
    """Create a story, or edit `story` when given."""
    _require(title, "Title")
    _require(content, "Content")
    if story is None:
        record = new_story(title, content, cover_image)
        cache.add(record)
    else:
        record = revise_story(story, title=title, content=content, cover_image=cover_image)
        cache.update(story.id, record, upsert=True)
    await cache.flush()
    return Submission(record, cache.status(record.id))


async def submit_character(
    cache: RecordCache[Character],
    *,
    name: str,
    origin: str = "",
    birth_date: str = "",
    backstory: str = "",
    traits: list[str] | str | None = None,
    image: str | None = None,
    character: Character | None = None,
) -> Submission:
    """Create a character, or edit `character` when given."""
    _require(name, "Name")
    fields = {
        "origin": origin,
        "birth_date": birth_date,
        "backstory": backstory,
        "traits": _parse_traits(traits),
        "image": image,
    }
    if character is None:
        record = new_character(name, **fields)
        cache.add(record)
    else:
        record = revise_character(character, name=name, **fields)
        cache.update(character.id, record, upsert=True)
    await cache.flush()
    return Submission(record, cache.status(record.id))
