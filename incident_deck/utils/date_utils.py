# ---
# File: incident_deck/utils/date_utils.py
# Purpose: Human readable incident timestamps ("12 April, 2026" / "12 April, 2026, 3:05 PM")
# ---

from datetime import datetime, tzinfo
from typing import Optional, Union


# ---
# Accept datetimes or ISO-8601 strings (a trailing "Z" means UTC).
# When `tz` is given, aware values are converted to it before formatting;
# otherwise the value's own offset is kept.
# ---
def _to_datetime(value: Union[str, datetime], tz: Optional[tzinfo] = None) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if tz is not None and value.tzinfo is not None:
        value = value.astimezone(tz)
    return value


def format_date(value: Union[str, datetime], tz: Optional[tzinfo] = None) -> str:
    moment = _to_datetime(value, tz)
    return f"{moment.day} {moment.strftime('%B')}, {moment.year}"


def format_datetime(value: Union[str, datetime], tz: Optional[tzinfo] = None) -> str:
    moment = _to_datetime(value, tz)
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{format_date(moment)}, {hour}:{moment.minute:02d} {meridiem}"
