"""
Data models for planner events and categories.

Events are frozen dataclasses so derived views can hold references to them
without copying. Categories stay TypedDicts since they are only ever
round-tripped through storage and the API.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, TypedDict

# Graph and JS clients emit up to 7 fractional digits; fromisoformat wants at most 6
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_instant(value: Any) -> datetime:
    """
    Parse an ISO-8601 string (or date/datetime) into a datetime.

    Accepts date-only strings, a trailing 'Z', and over-long fractions.

    Raises:
        ValueError: value is empty or not an ISO-8601 date/datetime
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if value is None:
        raise ValueError("Missing date value")

    text = str(value).strip()
    if not text:
        raise ValueError("Missing date value")
    if len(text) == 10:
        return datetime.combine(date.fromisoformat(text), time.min)

    text = text.replace("Z", "+00:00")
    text = _FRACTION_RE.sub(r"\1", text)
    return datetime.fromisoformat(text)


class CategoryConfig(TypedDict):
    """Event category shown in the legend and used for colouring."""
    id: str
    label: str
    color: str


@dataclass(frozen=True)
class Event:
    """A date-ranged planner event."""

    id: str
    title: str
    start_date: datetime
    end_date: datetime
    category_id: str
    notes: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """
        Build an Event from a camelCase or snake_case dictionary.

        Raises:
            ValueError: a required field is missing or a date does not parse
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        event_id = pick("id")
        if not event_id:
            raise ValueError("Event is missing an id")

        return cls(
            id=str(event_id),
            title=str(pick("title", default="")),
            start_date=parse_instant(pick("startDate", "start_date")),
            end_date=parse_instant(pick("endDate", "end_date")),
            category_id=str(pick("categoryId", "category_id", default="")),
            notes=str(pick("notes", default="")),
        )

    def to_dict(self) -> dict:
        """Serialize with camelCase keys and ISO strings."""
        return {
            "id": self.id,
            "title": self.title,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "categoryId": self.category_id,
            "notes": self.notes,
        }
