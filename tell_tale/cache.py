"""Client cache: an optimistic, locally persisted replica of the server records.

Lifecycle of a RecordCache:

    open()      read the local cache (absent or corrupt → empty) so callers can
                render before the network answers
    refresh()   fetch the server collection, merge it over the in-memory
                records (server wins on id collision), persist, mark loaded
    add/update/remove
                synchronous, optimistic; applied in memory, written through to
                the local cache once loaded, and queued for the server
    flush()     mirror queued changes to the server in order; each record
                ends up CONFIRMED or FAILED

The cache never raises network failures to its callers. A FAILED status is
the only trace of a change that was applied locally but never reached the
server, so callers can report partial failure instead of diverging silently.

Write-through is gated on the explicit `loaded` flag rather than on the
collection being non-empty: deleting the last record persists an empty list,
and nothing clobbers the local cache before the first refresh completes.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Generic, Literal, TypeVar

from dotenv import load_dotenv
from pydantic import ValidationError

from .api import ApiClient, ApiError, NotFoundError
from .local_cache import CHARACTERS_KEY, STORIES_KEY, FileStore, KeyValueStore
from .merge import merge_records
from .models import Character, Record, Story

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)

DEFAULT_API_URL = "http://localhost:13013/api"
DEFAULT_CACHE_DIR = Path.home() / ".tell-tale"


class SyncStatus(str, Enum):
    PENDING = "pending"  # applied locally, not yet confirmed by the server
    CONFIRMED = "confirmed"
    FAILED = "failed"  # applied locally, server mirror failed


@dataclass
class PendingChange:
    action: Literal["create", "update", "delete"]
    record_id: str
    record: Record | None = None


class RecordCache(Generic[R]):
    """Replica of one server collection.

    Args:
        model:       Record model used to validate cached and fetched data.
        collection:  Server collection name, e.g. "stories".
        storage_key: Key of the JSON array in the local store.
        local:       Durable key-value store.
        api:         Client for the server endpoints.
    """

    def __init__(
        self,
        model: type[R],
        collection: str,
        storage_key: str,
        local: KeyValueStore,
        api: ApiClient,
    ) -> None:
        self._model = model
        self._collection = collection
        self._key = storage_key
        self._local = local
        self._api = api
        self._records: list[R] = []
        self._loaded = False
        self._loading = True
        self._queue: list[PendingChange] = []
        self._status: dict[str, SyncStatus] = {}
        self._flush_lock = asyncio.Lock()

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def records(self) -> list[R]:
        return list(self._records)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def pending(self) -> int:
        return len(self._queue)

    def status(self, record_id: str) -> SyncStatus | None:
        return self._status.get(record_id)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def open(self) -> list[R]:
        """Populate in-memory state from the local cache."""
        self._records = self._read_local()
        return self.records

    async def refresh(self) -> list[R]:
        """Fetch the server collection and merge it over the in-memory records."""
        try:
            data = await self._api.list(self._collection)
        except ApiError as e:
            logger.warning("Fetching %s failed, keeping cached records: %s", self._collection, e)
        else:
            server = self._validate_items(data, f"server {self._collection}")
            self._records = merge_records(self._records, server)
        finally:
            self._loaded = True
            self._loading = False
        self._persist()
        return self.records

    async def load(self) -> list[R]:
        self.open()
        return await self.refresh()

    def _read_local(self) -> list[R]:
        raw = self._local.get_item(self._key)
        if raw is None:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError(f"expected a list, got {type(items).__name__}")
        except ValueError as e:
            logger.warning("Ignoring unreadable local cache %r: %s", self._key, e)
            return []
        return self._validate_items(items, f"local cache {self._key!r}")

    def _validate_items(self, items: list, source: str) -> list[R]:
        """Validate record by record, skipping (and logging) the bad ones."""
        records: list[R] = []
        for i, item in enumerate(items):
            try:
                records.append(self._model.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping invalid record %d from %s: %s", i, source, e)
        return records

    def _persist(self) -> None:
        if not self._loaded:
            return
        payload = json.dumps([r.to_json() for r in self._records])
        try:
            self._local.set_item(self._key, payload)
        except OSError as e:
            logger.warning("Could not write local cache %r: %s", self._key, e)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_id(self, record_id: str) -> R | None:
        """Exact-match scan of the in-memory records. No network fallback."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    async def fetch_by_id(self, record_id: str) -> R | None:
        """In-memory lookup, falling back to the server. None if absent or unreachable."""
        record = self.get_by_id(record_id)
        if record is not None:
            return record
        try:
            data = await self._api.get(self._collection, record_id)
            return self._model.model_validate(data)
        except NotFoundError:
            return None
        except (ApiError, ValidationError) as e:
            logger.warning("Fetching %s/%s failed: %s", self._collection, record_id, e)
            return None

    # ------------------------------------------------------------------
    # Optimistic mutators
    # ------------------------------------------------------------------

    def add(self, record: R) -> None:
        """Prepend a new record."""
        if self.get_by_id(record.id) is not None:
            raise ValueError(f"Record {record.id!r} already exists in {self._collection}")
        self._records.insert(0, record)
        self._enqueue(PendingChange("create", record.id, record))
        self._persist()

    def update(self, record_id: str, record: R, *, upsert: bool = False) -> bool:
        """Replace the record with `record_id` wholesale. False if absent.

        With `upsert`, an absent record (one fetched straight from the server)
        is prepended instead; the server still receives an update.
        """
        if record.id != record_id:
            raise ValueError(f"Record id is immutable ({record_id!r} → {record.id!r})")
        for i, existing in enumerate(self._records):
            if existing.id == record_id:
                self._records[i] = record
                break
        else:
            if not upsert:
                return False
            self._records.insert(0, record)
        self._enqueue(PendingChange("update", record_id, record))
        self._persist()
        return True

    def remove(self, record_id: str) -> bool:
        remaining = [r for r in self._records if r.id != record_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        self._enqueue(PendingChange("delete", record_id))
        self._persist()
        return True

    def _enqueue(self, change: PendingChange) -> None:
        self._queue.append(change)
        self._status[change.record_id] = SyncStatus.PENDING

    # ------------------------------------------------------------------
    # Server mirroring
    # ------------------------------------------------------------------

    async def flush(self) -> dict[str, SyncStatus]:
        """Mirror queued changes to the server, oldest first.

        Only one flush drains the queue at a time; a concurrent call waits for
        it, so a record's changes reach the server in the order they were made.
        A record's status is settled by its latest change only: while a newer
        change for the same id is still queued it stays PENDING.

        Returns the status of every record touched by this flush.
        """
        results: dict[str, SyncStatus] = {}
        async with self._flush_lock:
            while self._queue:
                change = self._queue.pop(0)
                try:
                    await self._send(change)
                except ApiError as e:
                    logger.warning(
                        "%s of %s/%s not mirrored to server: %s",
                        change.action, self._collection, change.record_id, e,
                    )
                    status = SyncStatus.FAILED
                else:
                    status = SyncStatus.CONFIRMED
                if not any(c.record_id == change.record_id for c in self._queue):
                    self._status[change.record_id] = status
                results[change.record_id] = self._status[change.record_id]
        return results

    async def _send(self, change: PendingChange) -> None:
        if change.action == "create":
            await self._api.create(self._collection, change.record.to_json())
        elif change.action == "update":
            await self._api.update(self._collection, change.record_id, change.record.to_json())
        else:
            await self._api.delete(self._collection, change.record_id)


class ClientStore:
    """Stories and characters caches sharing one local store and API client."""

    def __init__(self, local: KeyValueStore, api: ApiClient) -> None:
        self.stories: RecordCache[Story] = RecordCache(Story, "stories", STORIES_KEY, local, api)
        self.characters: RecordCache[Character] = RecordCache(
            Character, "characters", CHARACTERS_KEY, local, api
        )

    @classmethod
    def from_env(cls) -> ClientStore:
        """Build from TELL_TALE_API_URL / TELL_TALE_CACHE_DIR / TELL_TALE_TIMEOUT."""
        load_dotenv(Path(__file__).parent.parent / ".env")
        api = ApiClient(
            os.getenv("TELL_TALE_API_URL", DEFAULT_API_URL),
            timeout=float(os.getenv("TELL_TALE_TIMEOUT", "30")),
        )
        cache_dir = Path(os.getenv("TELL_TALE_CACHE_DIR", str(DEFAULT_CACHE_DIR))).expanduser()
        return cls(FileStore(cache_dir), api)

    @property
    def loading(self) -> bool:
        return self.stories.loading or self.characters.loading

    async def load(self) -> None:
        """Show cached records first, then reconcile both collections with the server."""
        self.stories.open()
        self.characters.open()
        await asyncio.gather(self.stories.refresh(), self.characters.refresh())

    async def flush(self) -> dict[str, SyncStatus]:
        results = await self.stories.flush()
        results.update(await self.characters.flush())
        return results
