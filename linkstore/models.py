"""Data models for the link store."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

# Fractional seconds of an ISO-8601 timestamp, followed by the offset if any
_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d\d:\d\d$|$)")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 / RFC 3339 timestamp into an aware datetime.

    Accepts a trailing "Z" and fractions of any precision (nanoseconds are
    truncated to microseconds). A timestamp without offset is taken as UTC.

    Raises:
        ValueError: If the value is not a timestamp
    """
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string, got {type(value).__name__}")

    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Link:
    """A short link record as held in memory and in the snapshot file."""

    original_url: str
    short_code: str
    created_at: datetime
    ip: str
    visits: int = 0

    def to_dict(self) -> dict:
        """Convert to the snapshot representation."""
        return {
            "original_url": self.original_url,
            "short_code": self.short_code,
            "created_at": self.created_at.isoformat(),
            "ip": self.ip,
            "visits": self.visits,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Link":
        """Create from the snapshot representation.

        Raises:
            KeyError: If a required field is missing
            ValueError: If the timestamp or visit count is malformed
        """
        created_at = data["created_at"]
        if isinstance(created_at, datetime):
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
        else:
            created_at = parse_timestamp(created_at)

        visits = int(data.get("visits", 0))
        if visits < 0:
            raise ValueError(f"Negative visit count for {data['short_code']}")

        return cls(
            original_url=data["original_url"],
            short_code=data["short_code"],
            created_at=created_at,
            ip=data["ip"],
            visits=visits,
        )

    def copy(self) -> "Link":
        """Return a detached copy safe to hand out of the store."""
        return Link(
            original_url=self.original_url,
            short_code=self.short_code,
            created_at=self.created_at,
            ip=self.ip,
            visits=self.visits,
        )
