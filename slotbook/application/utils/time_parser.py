from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(am|pm)?\s*$", re.IGNORECASE)
_WINDOW_PATTERN = re.compile(r"^\s*(\d{1,2}:\d{2})\s*-\s*(\d{1,2}:\d{2})\s*$")


def parse_time_label(text: str) -> time | None:
    """Parse "9:00 AM", "1:30 pm" or "14:30". Returns None if not a valid time of day."""
    match = _TIME_PATTERN.match(text or "")
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    am_pm = (match.group(3) or "").lower() or None

    if am_pm:
        if not 1 <= hour <= 12:
            return None
        if am_pm == "pm" and hour != 12:
            hour += 12
        elif am_pm == "am" and hour == 12:
            hour = 0

    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return time(hour, minute)
    return None


def parse_iso_date(text: str) -> date | None:
    try:
        return date.fromisoformat((text or "").strip())
    except ValueError:
        return None


def add_minutes(start: time, minutes: int) -> time | None:
    """Returns start + minutes, or None when the result rolls past midnight."""
    anchor = datetime.combine(date.min, start)
    end = anchor + timedelta(minutes=minutes)
    # ending exactly at midnight also rolls the day
    if end.date() != anchor.date():
        return None
    return end.time()


def format_24h(value: time) -> str:
    return value.strftime("%H:%M")


def format_12h(value: time) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def parse_hours_spec(spec: str) -> list[tuple[time, time]]:
    """Parse "09:00-12:00,13:00-17:00" into ordered (open, close) windows."""
    windows: list[tuple[time, time]] = []
    for chunk in (spec or "").split(","):
        if not chunk.strip():
            continue
        match = _WINDOW_PATTERN.match(chunk)
        if not match:
            raise ValueError(f"Invalid business hours window: {chunk!r}")
        open_ = parse_time_label(match.group(1))
        close = parse_time_label(match.group(2))
        if open_ is None or close is None or close <= open_:
            raise ValueError(f"Invalid business hours window: {chunk!r}")
        windows.append((open_, close))
    return sorted(windows)
