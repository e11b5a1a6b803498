"""Reconciliation of the local replica with the server collection.

Merge is last-write-by-source-order: every local record is inserted keyed by
id, then every server record, overwriting on collision. The server copy wins
even when the local one carries a newer updatedAt. A collision keeps the slot
of the first insertion, so local ordering survives for shared ids and
local-only records stay where they were.

Comparing updatedAt instead would be the timestamp-based alternative; the
cache deliberately does not do that (see DESIGN.md).
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

R = TypeVar("R")


def record_id(record: Any) -> str:
    """Identifier of a record model or a raw JSON dict."""
    if isinstance(record, Mapping):
        return record["id"]
    return record.id


def merge_records(
    local: Iterable[R],
    server: Iterable[R],
    key: Callable[[R], str] = record_id,
) -> list[R]:
    """Fold `server` over `local` by id. Server wins on collision."""
    by_id: dict[str, R] = {}
    for record in local:
        by_id[key(record)] = record
    for record in server:
        by_id[key(record)] = record
    return list(by_id.values())
