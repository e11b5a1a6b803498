"""Record factories: new stories/characters and revisions of existing ones.

New records get a fresh id and equal created/updated timestamps. Revisions
keep id and createdAt, replace the given fields and refresh updatedAt; the
Story model re-derives the excerpt on construction.
"""

import uuid
from typing import Any

from .models import Character, Story, now_iso


def new_id() -> str:
    return uuid.uuid4().hex


def new_story(
    title: str,
    content: str,
    cover_image: str | None = None,
    *,
    record_id: str | None = None,
    now: str | None = None,
) -> Story:
    """Create a story with a fresh id and createdAt == updatedAt."""
    stamp = now or now_iso()
    return Story(
        id=record_id or new_id(),
        title=title,
        content=content,
        cover_image=cover_image,
        created_at=stamp,
        updated_at=stamp,
    )


def revise_story(story: Story, *, now: str | None = None, **changes: Any) -> Story:
    """Full-record replacement of `story` with `changes` applied."""
    return _revise(Story, story, now, changes)


def new_character(
    name: str,
    *,
    origin: str = "",
    birth_date: str = "",
    backstory: str = "",
    traits: list[str] | None = None,
    image: str | None = None,
    record_id: str | None = None,
    now: str | None = None,
) -> Character:
    """Create a character with a fresh id and createdAt == updatedAt."""
    stamp = now or now_iso()
    return Character(
        id=record_id or new_id(),
        name=name,
        origin=origin,
        birth_date=birth_date,
        backstory=backstory,
        traits=list(traits or []),
        image=image,
        created_at=stamp,
        updated_at=stamp,
    )


def revise_character(character: Character, *, now: str | None = None, **changes: Any) -> Character:
    """Full-record replacement of `character` with `changes` applied."""
    return _revise(Character, character, now, changes)


def _revise(model, record, now, changes):
    for frozen in ("id", "created_at"):
        if frozen in changes:
            raise ValueError(f"{frozen} cannot be changed")
    fields = record.model_dump()
    fields.update(changes)
    fields["updated_at"] = now or now_iso()
    return model(**fields)
