"""
Event validation for the editing surface and imports.

The calendar core tolerates bad events; this module is where they get
reported back to whoever created them.
"""

from collections import Counter
from typing import Iterable

from core.dates import as_date
from models.events import Event


def validate_event(event: Event, category_ids: Iterable[str]) -> list[str]:
    """
    Validate a single event.

    Checks:
    1. Title is present
    2. End date is not before start date (date-only)
    3. Category exists
    """
    errors = []

    if not event.title.strip():
        errors.append("Missing title")

    if as_date(event.end_date) < as_date(event.start_date):
        errors.append(
            f"End date {as_date(event.end_date).isoformat()} is before "
            f"start date {as_date(event.start_date).isoformat()}"
        )

    known = set(category_ids)
    if event.category_id not in known:
        errors.append(f"Unknown category '{event.category_id}'")

    return errors


def validate_events(events: list[Event], category_ids: Iterable[str]) -> dict[str, str]:
    """
    Validate a batch of events.

    Returns a mapping of event id -> "; "-joined error messages for every
    event that failed. Duplicate ids are reported on each duplicate.
    """
    known = set(category_ids)
    id_counts = Counter(event.id for event in events)
    errors_by_id: dict[str, list[str]] = {}

    for event in events:
        errors = validate_event(event, known)
        if id_counts[event.id] > 1:
            errors.append(f"Duplicate event id '{event.id}'")
        if errors:
            existing = errors_by_id.setdefault(event.id, [])
            existing.extend(e for e in errors if e not in existing)

    return {event_id: "; ".join(errors) for event_id, errors in errors_by_id.items()}
