from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Optional

_BYTE_UNITS = ("B", "KB", "MB", "GB")

_STATUS_LABELS = {
    "open": "🔴 Open",
    "closed": "✅ Closed",
    "resolved": "✅ Resolved",
}

_SEVERITY_LABELS = {
    "critical": "🔥 Critical",
    "warning": "⚠️ Warning",
    "info": "ℹ️ Info",
}


def format_duration(ms: Optional[float]) -> str:
    if ms is None:
        return "N/A"
    if ms < 1:
        return f"{ms * 1000:.2f} μs"
    if ms < 1000:
        return f"{ms:.2f} ms"
    return f"{ms / 1000:.2f} s"


def format_bytes(n: Optional[float]) -> str:
    if n is None:
        return "N/A"
    value = float(n)
    unit = 0
    while value >= 1024 and unit < len(_BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {_BYTE_UNITS[unit]}"


def _from_epoch(value: float, per_second: float = 1.0) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(value / per_second, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_time(ts: Any) -> Optional[datetime]:
    if isinstance(ts, bool):
        return None
    # numeric timestamps are epoch milliseconds
    if isinstance(ts, (int, float)):
        return _from_epoch(ts, 1000.0)
    s = str(ts).strip()
    if s.isascii() and s.isdigit():
        try:
            v = int(s)
        except ValueError:  # exceeds the int string-conversion limit
            return None
        if v > 10_000_000_000:  # ms
            return _from_epoch(v, 1000.0)
        return _from_epoch(v)
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)
    except (OverflowError, ValueError):
        return None


def format_date(ts: Any) -> str:
    # 0 counts as absent, like an empty string
    if ts is None or ts == "" or ts == 0:
        return "N/A"
    dt = _parse_time(ts)
    if dt is None:
        return str(ts)
    return dt.strftime("%Y-%m-%d %H:%M:%S") + " UTC"


def format_status(state: Optional[str]) -> str:
    if state is None:
        return "N/A"
    return _STATUS_LABELS.get(state, state)


def format_severity(severity: Optional[str]) -> str:
    if severity is None:
        return "N/A"
    return _SEVERITY_LABELS.get(severity, severity)
