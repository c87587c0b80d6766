"""Resolution of free-form schedule expressions to calendar dates."""

import re
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

import parsedatetime

from .errors import DateInPast, InvalidArgument

WEEKDAYS = ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]
NEXT_QUALIFIERS = {"next", "n"}

DAYS_RE = re.compile(r"^(\d+)\s*days?$")


def weekday_index(day: date) -> int:
    """Return the weekday of ``day`` counting Sunday as 0."""
    return (day.weekday() + 1) % 7


def specials_to_date(request: str, today: date) -> Optional[date]:
    """Resolve the keywords ``today`` and ``tomorrow``."""
    keyword = request.strip().lower()
    if keyword == "today":
        return today
    if keyword == "tomorrow":
        return today + timedelta(days=1)
    return None


def dow_to_date(request: str, today: date) -> Optional[date]:
    """Resolve a weekday name, optionally prefixed with ``next`` or ``n``.

    The result is the next occurrence of that weekday strictly after today;
    a ``next`` prefix pushes it out one more week.
    """
    words = request.strip().lower().split()
    if not words or len(words) > 2:
        return None
    if len(words) == 2 and words[0] not in NEXT_QUALIFIERS:
        return None
    if words[-1] not in WEEKDAYS:
        return None

    date_gap = WEEKDAYS.index(words[-1]) - weekday_index(today)
    if date_gap <= 0:
        date_gap += 7
    next_date = today + timedelta(days=date_gap)

    if next_date <= today:
        next_date += timedelta(days=7)

    if len(words) == 2:
        next_date += timedelta(days=7)

    return next_date


def days_to_date(request: str, today: date) -> Optional[date]:
    """Resolve ``"<N> day(s)"`` relative to today."""
    match = DAYS_RE.match(request.strip().lower())
    if not match:
        return None
    return today + timedelta(days=int(match.group(1)))


def parse_date(request: str, today: date) -> Optional[date]:
    """Parse a generic calendar date.

    ISO dates are tried first; anything else goes through parsedatetime,
    relative to ``today``.
    """
    request = request.strip()
    if not request:
        return None

    try:
        return date.fromisoformat(request)
    except ValueError:
        pass

    calendar = parsedatetime.Calendar()
    source_time = datetime.combine(today, datetime.min.time())
    time_struct, parse_status = calendar.parse(request, source_time)
    if parse_status > 0:
        return date(*time_struct[:3])

    return None


RESOLVERS: Sequence[Callable[[str, date], Optional[date]]] = (
    specials_to_date,
    dow_to_date,
    days_to_date,
    parse_date,
)


def resolve_date(request: str, today: date) -> date:
    """Resolve a date expression, first matching stage wins.

    Raises:
        InvalidArgument: If no stage understands the expression
    """
    for resolver in RESOLVERS:
        resolved = resolver(request, today)
        if resolved is not None:
            return resolved

    raise InvalidArgument(
        f"I couldn't understand your date '{request}' "
        "(should be YYYY-MM-DD, or mon/tue/wed, etc.)"
    )


def resolve_schedule_date(request: str, today: date) -> date:
    """Resolve a date expression that a todo is about to be scheduled on.

    Raises:
        InvalidArgument: If the expression cannot be understood
        DateInPast: If it resolves to a day before today
    """
    resolved = resolve_date(request, today)
    if resolved < today:
        raise DateInPast(resolved)
    return resolved


def is_tomorrow(day: date, today: date) -> bool:
    return day == today + timedelta(days=1)


def is_this_week(day: date, today: date) -> bool:
    return day < today + timedelta(days=6)


def is_next_week(day: date, today: date) -> bool:
    return today + timedelta(days=6) <= day < today + timedelta(days=14)
