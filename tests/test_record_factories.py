"""Tests for new/revise record factories."""

import pytest

from tell_tale.models import parse_timestamp
from tell_tale.records import new_character, new_id, new_story, revise_character, revise_story


def test_new_id_is_unique():
    assert len({new_id() for _ in range(100)}) == 100


def test_new_story_timestamps_equal():
    s = new_story("T", "line1\nline2")
    assert s.created_at == s.updated_at
    assert s.excerpt == "line1 line2"
    assert s.cover_image is None


def test_new_story_explicit_id_and_time():
    s = new_story("T", "c", record_id="a", now="2024-01-01T00:00:00.000Z")
    assert s.id == "a"
    assert s.created_at == "2024-01-01T00:00:00.000Z"


def test_revise_story_refreshes_updated_and_excerpt():
    s = new_story("T", "old", now="2024-01-01T00:00:00.000Z")
    r = revise_story(s, content="new\ntext")
    assert r.id == s.id
    assert r.created_at == s.created_at
    assert r.excerpt == "new text"
    assert parse_timestamp(r.updated_at) > parse_timestamp(s.updated_at)
    assert s.content == "old"


def test_revise_story_rejects_id_change():
    s = new_story("T", "c")
    with pytest.raises(ValueError):
        revise_story(s, id="other")
    with pytest.raises(ValueError):
        revise_story(s, created_at="2020-01-01T00:00:00.000Z")


def test_new_character_copies_traits():
    traits = ["brave"]
    c = new_character("Mara", traits=traits)
    traits.append("loud")
    assert c.traits == ["brave"]
    assert c.created_at == c.updated_at


def test_revise_character():
    c = new_character("Mara", origin="Hollow Point", now="2024-01-01T00:00:00.000Z")
    r = revise_character(c, name="Mara Quill")
    assert r.name == "Mara Quill"
    assert r.origin == "Hollow Point"
    assert r.updated_at != c.updated_at
