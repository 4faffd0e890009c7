"""Base view models and normalization helpers shared by every backend."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ViewModel(BaseModel):
    """Base class for all JSON-facing view models.

    Fields are declared in snake_case and serialized in camelCase via
    ``model_dump(by_alias=True)``.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting absent optional blocks."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ListResult[T: ViewModel](ViewModel):
    """A bounded listing with its truncation state.

    Attributes:
        items: The entries returned by this call.
        truncated: True if the upstream has more entries than were returned.
        next_cursor: Opaque cursor for the next page ("" when none).
    """

    items: list[T] = Field(default_factory=list)
    truncated: bool = False
    next_cursor: str = ""


def _safe_get(obj: Any, *keys: str, default: Any = None) -> Any:
    """Safely traverse nested keys of an upstream JSON object."""
    current = obj
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
    return current if current is not None else default


def str_id(value: Any) -> str:
    """Render an upstream identifier canonically.

    Integers render in decimal, UUIDs in lowercase hyphenated form, and
    absent identifiers as "".
    """
    if value is None:
        return ""
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    text = str(value).strip()
    if len(text) == 36:
        try:
            return str(uuid.UUID(text))
        except ValueError:
            return text
    return text


def to_int(value: Any, default: int = 0) -> int:
    """Coerce an upstream number (possibly a string) to int."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_bool(value: Any) -> bool:
    """Coerce an upstream flag to bool.

    The IaaS API renders some flags as the strings "True"/"False".
    """
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def to_str_list(value: Any) -> list[str]:
    """Return a list of non-empty strings, [] for null."""
    if not value:
        return []
    return [str(v) for v in value if v not in (None, "")]


def format_timestamp(value: Any) -> str:
    """Render an upstream timestamp as ISO-8601 with offset.

    Accepts datetimes, ISO-8601 strings (with ``Z`` or an offset) and unix
    seconds. Naive values and unix seconds are taken as UTC. Absent or
    unparsable values render as "".

    Examples:
        >>> format_timestamp(0)
        '1970-01-01T00:00:00+00:00'
        >>> format_timestamp("2024-01-02T03:04:05Z")
        '2024-01-02T03:04:05+00:00'
    """
    if value is None or value == "" or isinstance(value, bool):
        return ""
    dt: datetime
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, int | float):
        dt = datetime.fromtimestamp(value, tz=UTC)
    elif isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            dt = datetime.fromtimestamp(int(text), tz=UTC)
        else:
            try:
                dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return ""
    else:
        return ""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    if dt.year <= 1:
        return ""
    return dt.replace(microsecond=0).isoformat()
