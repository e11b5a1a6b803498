"""Character file storage."""

from typing import Any

from .records import get_record, list_records, save_records

CHARACTERS = "characters"


def get_characters() -> list[dict[str, Any]]:
    """Load all characters. Returns [] if missing."""
    return list_records(CHARACTERS)


def get_character(character_id: str) -> dict[str, Any] | None:
    """Find a single character by id. Returns None if not found."""
    return get_record(CHARACTERS, character_id)


def save_characters(characters: list[dict[str, Any]]) -> bool:
    return save_records(CHARACTERS, characters)
