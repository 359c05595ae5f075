"""
Feedback data model
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
import json

# Sources treated as enterprise (B2B / paid tier). Everything else is self-serve.
ENTERPRISE_SOURCES = frozenset({
    "customer support tickets",
    "customer-support-tickets",
    "email",
})


class Sentiment(str, Enum):
    """Sentiment attached to a feedback row"""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

    @classmethod
    def parse(cls, value) -> Optional["Sentiment"]:
        """Case-insensitive parse; returns None for unknown values"""
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return None


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse a stored timestamp into an aware UTC datetime

    Accepts ISO-8601 (with or without a trailing Z), the SQLite style
    "YYYY-MM-DD HH:MM:SS" and plain dates. Naive values are taken as UTC.

    Returns:
        datetime, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if not text:
            return None
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            try:
                parsed = datetime.strptime(text, "%Y-%m-%d %H:%M:%S")
            except ValueError:
                return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def is_enterprise_source(source: str) -> bool:
    """True if the channel is treated as enterprise"""
    return (source or "").strip().lower() in ENTERPRISE_SOURCES


@dataclass(frozen=True)
class FeedbackRecord:
    """One feedback row as read from storage (immutable)"""
    id: int
    source: str
    sentiment: str  # lower-cased on read
    comment: str
    timestamp: str

    @property
    def parsed_timestamp(self) -> Optional[datetime]:
        return parse_timestamp(self.timestamp)

    @property
    def sentiment_value(self) -> Optional[Sentiment]:
        return Sentiment.parse(self.sentiment)

    @property
    def is_enterprise(self) -> bool:
        return is_enterprise_source(self.source)

    @property
    def is_negative(self) -> bool:
        return self.sentiment_value is Sentiment.NEGATIVE

    def to_dict(self) -> dict:
        """Convert record to dictionary for storage"""
        return {
            "id": self.id,
            "source": self.source,
            "sentiment": self.sentiment,
            "comment": self.comment,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FeedbackRecord":
        """Create record from a stored dictionary"""
        return cls(
            id=int(data["id"]),
            source=str(data.get("source") or ""),
            sentiment=str(data.get("sentiment") or "").strip().lower(),
            comment=str(data.get("comment") or ""),
            timestamp=str(data.get("timestamp") or ""),
        )

    def to_json(self) -> str:
        """Convert record to JSON string"""
        return json.dumps(self.to_dict(), indent=2)
