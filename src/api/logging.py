"""SQLite request logging for import/export endpoints."""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from core.database import create_tables, get_connection

DETAIL_TYPES = ("validation_error", "event_imported", "warning")

_REQUEST_COLUMNS = (
    "request_id",
    "timestamp",
    "endpoint",
    "method",
    "client_ip",
    "year",
    "status_code",
    "error_code",
    "error_message",
    "processing_time_ms",
    "events_count",
)


@dataclass
class RequestLog:
    """One import or export call, written once the response is decided."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    year: int | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    events_count: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)
    started_at: float = field(default_factory=time.time, repr=False)

    def add_detail(self, detail_type: str, message: str) -> None:
        if detail_type not in DETAIL_TYPES:
            raise ValueError(f"Unknown detail type '{detail_type}'")
        self.details.append((detail_type, message))

    def fail(self, status_code: int, error_code: str, message: str) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.error_message = message

    def finish(self) -> None:
        """Stamp the elapsed time and persist. Logging never fails the request."""
        self.processing_time_ms = int((time.time() - self.started_at) * 1000)
        try:
            log_request(self)
        except Exception as e:
            print(f"  Request logging failed: {e}")


def log_request(log: RequestLog) -> None:
    """Write the request row and its detail rows in one transaction."""
    conn = get_connection()
    try:
        create_tables(conn)
        placeholders = ", ".join("?" for _ in _REQUEST_COLUMNS)
        conn.execute(
            f"INSERT INTO api_requests ({', '.join(_REQUEST_COLUMNS)}) VALUES ({placeholders})",
            tuple(getattr(log, column) for column in _REQUEST_COLUMNS),
        )
        conn.executemany(
            "INSERT INTO api_request_details (request_id, detail_type, message) VALUES (?, ?, ?)",
            [(log.request_id, detail_type, message) for detail_type, message in log.details],
        )
        conn.commit()
    finally:
        conn.close()
