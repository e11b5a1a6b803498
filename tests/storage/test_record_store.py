"""Tests for whole-collection JSON file storage."""

import json
import shutil

from backend import storage


def _story(story_id: str, title: str = "T") -> dict:
    return {
        "id": story_id,
        "title": title,
        "content": "line1\nline2",
        "excerpt": "line1 line2",
        "coverImage": None,
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }


# ── list_records ────────────────────────────────────────


def test_list_creates_empty_file():
    """A missing collection file is created as an empty array."""
    path = storage.collection_path("stories")
    assert not path.exists()
    assert storage.list_records("stories") == []
    assert json.loads(path.read_text()) == []


def test_list_recreates_missing_data_dir():
    shutil.rmtree(storage.data_dir())
    assert storage.list_records("stories") == []
    assert storage.collection_path("stories").is_file()


def test_list_corrupt_file_is_empty():
    """Unparseable JSON is treated as an empty collection, not an error."""
    path = storage.collection_path("stories")
    path.write_text("{not json")
    assert storage.list_records("stories") == []
    assert path.read_text() == "{not json"


def test_list_non_array_is_empty():
    storage.collection_path("stories").write_text('{"id": "a"}')
    assert storage.list_records("stories") == []


def test_list_skips_non_object_entries():
    """Entries that are not JSON objects are dropped; the valid records survive."""
    good = _story("a")
    storage.collection_path("stories").write_text(json.dumps([1, good, "x", None]))
    assert storage.list_records("stories") == [good]
    assert storage.get_record("stories", "a") == good
    assert storage.get_record("stories", "b") is None


# ── save_records ────────────────────────────────────────


def test_save_and_list_roundtrip():
    records = [_story("a")]
    assert storage.save_records("stories", records) is True
    assert storage.list_records("stories") == records


def test_save_is_pretty_printed():
    """Files are written with a 2-space indent."""
    records = [_story("a"), _story("b")]
    storage.save_records("stories", records)
    text = storage.collection_path("stories").read_text()
    assert text == json.dumps(records, indent=2)


def test_save_keeps_unicode():
    records = [_story("a", title="Café Münch")]
    storage.save_records("stories", records)
    assert "Café Münch" in storage.collection_path("stories").read_text(encoding="utf-8")
    assert storage.list_records("stories")[0]["title"] == "Café Münch"


def test_save_replaces_whole_collection():
    storage.save_records("stories", [_story("a"), _story("b")])
    storage.save_records("stories", [_story("c")])
    assert [r["id"] for r in storage.list_records("stories")] == ["c"]


def test_save_leaves_no_temp_files():
    storage.save_records("stories", [_story("a")])
    storage.save_records("stories", [_story("b")])
    assert sorted(p.name for p in storage.data_dir().iterdir()) == ["stories.json"]


def test_save_failure_returns_false_and_keeps_old_file(monkeypatch):
    """A failed rename leaves the previous contents intact."""
    storage.save_records("stories", [_story("a")])

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("backend.storage.records.os.replace", boom)
    assert storage.save_records("stories", [_story("b")]) is False
    monkeypatch.undo()

    assert [r["id"] for r in storage.list_records("stories")] == ["a"]
    assert sorted(p.name for p in storage.data_dir().iterdir()) == ["stories.json"]


def test_save_unserialisable_returns_false():
    storage.save_records("stories", [_story("a")])
    assert storage.save_records("stories", [{"id": object()}]) is False
    assert [r["id"] for r in storage.list_records("stories")] == ["a"]


# ── get_record ──────────────────────────────────────────


def test_get_record_by_id():
    storage.save_records("stories", [_story("a", "First"), _story("b", "Second")])
    assert storage.get_record("stories", "a")["title"] == "First"
    assert storage.get_record("stories", "b")["title"] == "Second"
    assert storage.get_record("stories", "nobody") is None


# ── Per-entity wrappers ─────────────────────────────────


def test_stories_and_characters_use_separate_files():
    storage.save_stories([_story("a")])
    storage.save_characters([{"id": "c1", "name": "Mara"}])
    assert storage.get_stories()[0]["id"] == "a"
    assert storage.get_characters()[0]["name"] == "Mara"
    assert storage.get_story("c1") is None
    assert storage.get_character("c1")["name"] == "Mara"
    assert (storage.data_dir() / "stories.json").is_file()
    assert (storage.data_dir() / "characters.json").is_file()
