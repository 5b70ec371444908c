from datetime import datetime, timezone
from typing import Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

Timestamp = Union[str, datetime]


def as_utc(ts: Timestamp) -> datetime:
    dt = isoparse(ts) if isinstance(ts, str) else ts
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def format_time_ago(ts: Timestamp, now: Optional[datetime] = None) -> str:
    then = as_utc(ts)
    now = as_utc(now) if now else datetime.now(timezone.utc)
    if then >= now:
        return "just now"

    delta = relativedelta(now, then)
    for unit in ("years", "months", "days", "hours", "minutes"):
        value = getattr(delta, unit)
        if value:
            return _plural(value, unit[:-1])
    return "just now"


def format_date_range(start: Timestamp, end: Timestamp) -> str:
    s, e = as_utc(start), as_utc(end)
    if s.date() == e.date():
        return f"{s:%b %d, %Y} {s:%H:%M} - {e:%H:%M} UTC"
    return f"{s:%b %d, %Y %H:%M} - {e:%b %d, %Y %H:%M} UTC"
