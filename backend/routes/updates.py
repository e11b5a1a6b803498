"""Shallow field merge shared by the PUT endpoints."""

from typing import Any

from fastapi import HTTPException
from pydantic import BaseModel, ValidationError

from tell_tale.models import now_iso, parse_timestamp


def merge_update(
    model: type[BaseModel], existing: dict[str, Any], changes: dict[str, Any]
) -> dict[str, Any]:
    """Apply `changes` over `existing` (body fields win) and revalidate.

    updatedAt from the body is kept only if it is not older than the stored
    one; otherwise the server stamps the current time.
    """
    merged = {**existing, **changes}
    supplied = changes.get("updatedAt")
    try:
        keep = supplied is not None and parse_timestamp(supplied) >= parse_timestamp(
            existing["updatedAt"]
        )
    except ValueError:
        raise HTTPException(422, "updatedAt is not an ISO-8601 timestamp")
    if not keep:
        merged["updatedAt"] = now_iso()
    try:
        record = model.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(422, str(e))
    return record.model_dump(mode="json", by_alias=True)
