"""
Field Resolution for Record Store Rows

Rows arrive from spreadsheet-backed webhooks whose column headers vary between
data sources. Every lookup goes through FIELD_ALIASES so header drift is fixed
in one place.
"""

import re
from datetime import datetime, timezone

# =============================================================================
# ALIAS TABLE
# =============================================================================

FIELD_ALIASES: dict[str, list[str]] = {
    "submitted_at": [
        "Date Submitted",
        "Submitted At",
        "Submission Date",
        "submittedAt",
        "Timestamp",
    ],
    "appointment_at": [
        "Appointment Date /Time",
        "Appointment Date/Time",
        "Appointment Date",
        "appointmentAt",
    ],
    "status": ["Status", "Lead Status", "Appointment Status"],
    "homeowner_name": ["Homeowner Name(s)", "Homeowner Name", "Homeowner", "homeownerName"],
    "address": ["Address", "Property Address"],
}

# Tried in order after ISO-8601
TIMESTAMP_FORMATS = [
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
]


def normalize_header(header: str) -> str:
    """Lower-case a header and drop all whitespace ("Appointment Date /Time" -> "appointmentdate/time")."""
    return re.sub(r"\s+", "", str(header)).lower()


def resolve_field(row: dict, field_name: str):
    """
    Return the first non-empty value for a logical field.

    Aliases are tried in table order; each alias matches any header that is
    equal after normalize_header. Returns None when no alias has a value.
    """
    aliases = FIELD_ALIASES[field_name]
    normalized = {}
    for key, value in row.items():
        normalized.setdefault(normalize_header(key), value)

    for alias in aliases:
        value = normalized.get(normalize_header(alias))
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def parse_timestamp(value) -> datetime | None:
    """
    Parse a record store timestamp.

    Accepts datetimes, epoch milliseconds, ISO-8601 strings (with 'Z' or an
    offset) and the spreadsheet formats in TIMESTAMP_FORMATS. Returns None for
    anything unparseable; callers treat that as a record without a timestamp.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
