"""Story file storage."""

from typing import Any

from .records import get_record, list_records, save_records

STORIES = "stories"


def get_stories() -> list[dict[str, Any]]:
    """Load all stories, newest first. Returns [] if missing."""
    return list_records(STORIES)


def get_story(story_id: str) -> dict[str, Any] | None:
    return get_record(STORIES, story_id)


def save_stories(stories: list[dict[str, Any]]) -> bool:
    return save_records(STORIES, stories)
