from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so services can take an explicit ``now`` and tests never
    depend on the wall clock.
    """
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` window covering one calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` window covering one calendar month."""
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def date_range_bounds(first: date, last: date) -> tuple[datetime, datetime]:
    """Half-open window covering every day from ``first`` to ``last`` inclusive."""
    start, _ = day_bounds(first)
    _, end = day_bounds(last)
    return start, end
