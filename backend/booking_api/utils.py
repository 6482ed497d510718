from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from bson import ObjectId


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def date_to_utc_midnight(value: date) -> datetime:
    """Convert a calendar date to timezone-aware UTC midnight datetime."""
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def serialize_doc(doc: Any) -> Any:
    """Recursively convert MongoDB docs into JSON-serializable structures."""
    if doc is None:
        return None

    if isinstance(doc, ObjectId):
        return str(doc)

    if isinstance(doc, datetime):
        if doc.tzinfo is None:
            # naive values from the store are UTC
            doc = doc.replace(tzinfo=timezone.utc)
        return doc.isoformat()

    if isinstance(doc, list):
        return [serialize_doc(x) for x in doc]

    if isinstance(doc, dict):
        out: dict[str, Any] = {}
        for k, v in doc.items():
            if k == "_id":
                out["id"] = serialize_doc(v)
            else:
                out[k] = serialize_doc(v)
        return out

    return doc

