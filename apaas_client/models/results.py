"""
Data containers shared by the token manager and the iterators, plus the
helper that reads record items out of a response envelope.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SessionToken:
    """A bearer token and its absolute expiry as epoch milliseconds."""

    access_token: str = field(repr=False)
    expire_time: int

    def expires_within(self, now_ms: float, margin_ms: int) -> bool:
        return now_ms + margin_ms > self.expire_time


@dataclass
class AggregatedResult:
    """Records accumulated across the pages or chunks of one operation."""

    total: int = 0
    items: list[dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)


def extract_items(envelope: dict[str, Any]) -> list[dict[str, Any]]:
    """Returns ``data.items`` of a response envelope, or an empty list."""
    data = envelope.get("data") or {}
    items = data.get("items") if isinstance(data, dict) else None
    return list(items) if isinstance(items, list) else []
