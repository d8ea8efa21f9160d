"""Date helpers. Report days are local calendar days."""

import datetime


def start_of_day(day: datetime.date) -> datetime.datetime:
    """Local midnight of ``day`` as an aware datetime."""
    return datetime.datetime.combine(day, datetime.time.min).astimezone()


def end_of_day(day: datetime.date) -> datetime.datetime:
    """Last representable instant of ``day`` in local time, as an aware datetime."""
    return datetime.datetime.combine(day, datetime.time.max).astimezone()


def previous_day(day: datetime.date) -> datetime.date:
    return day - datetime.timedelta(days=1)


def format_iso_date(day: datetime.date) -> str:
    return day.strftime("%Y-%m-%d")


def format_human_date(day: datetime.date) -> str:
    # e.g. "Monday, October 19, 2026"
    return f"{day.strftime('%A, %B')} {day.day}, {day.year}"


def format_full_timestamp(ts: datetime.datetime) -> str:
    """Render a timestamp in local time, e.g. ``Mon, Oct 19, 2026, 03:04 PM``."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=datetime.timezone.utc)
    return ts.astimezone().strftime("%a, %b %d, %Y, %I:%M %p")


def as_aware(ts: datetime.datetime) -> datetime.datetime:
    """Treat naive timestamps as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=datetime.timezone.utc)
    return ts
