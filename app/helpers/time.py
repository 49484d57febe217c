# app/helpers/time.py
import re
from datetime import date, datetime, time, timezone
from typing import Optional

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_PATTERN = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def today() -> date:
    return date.today()


def parse_date(value: str) -> Optional[date]:
    """`YYYY-MM-DD` → date, or None when the text is not a real calendar date."""
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_time(value: str) -> Optional[time]:
    """24-hour `HH:mm` → time, or None."""
    if not isinstance(value, str):
        return None
    match = TIME_PATTERN.fullmatch(value)
    if not match:
        return None
    return time(int(match.group(1)), int(match.group(2)))


def parse_clock(value: str) -> Optional[time]:
    """Like parse_time, but also accepts a trailing `:ss` (seconds are dropped)."""
    if isinstance(value, str) and len(value) == 8 and value[5] == ":" and value[6:].isdigit():
        if int(value[6:]) > 59:
            return None
        value = value[:5]
    return parse_time(value)


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def minutes_between(start: time, end: time) -> int:
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
