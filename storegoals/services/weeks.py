"""
Week reference resolution.

A week reference is a 6-character string naming one Monday-based calendar
week. Two encodings exist in stored data:

  WWYYYY   week then year   (current; e.g. "462025")
  YYYYWW   year then week   (legacy rows; e.g. "202546")

Week numbering: weeks start on Monday and week 1 is the week that contains
Jan 1. A week that straddles New Year therefore belongs to the *following*
year (Mon 2024-12-30 → "012025").

Public API
----------
parse_week_reference(ref)        -> WeekReference   (stored strings, legacy-first disambiguation)
read_week_reference(ref)         -> WeekReference   (client strings, WWYYYY-first)
week_reference_from_parts(w, y)  -> WeekReference
current_week_reference(today)    -> str             ("WWYYYY")
resolve_week_range(ref)          -> WeekRange
week_range_for(week_ref)         -> WeekRange
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from storegoals.core.errors import InvalidFormatError


MIN_WEEK, MAX_WEEK = 1, 53
MIN_YEAR, MAX_YEAR = 2000, 2100
WEEK_REF_LENGTH = 6


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeekReference:
    week: int
    year: int

    def encode(self) -> str:
        return f"{self.week:02d}{self.year:04d}"

    def encode_legacy(self) -> str:
        return f"{self.year:04d}{self.week:02d}"

    def __str__(self) -> str:
        return self.encode()


@dataclass(frozen=True)
class WeekRange:
    start: date   # Monday
    end: date     # Sunday, inclusive

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range((self.end - self.start).days + 1)]

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def monday_on_or_before(day: date) -> date:
    day = as_date(day)
    return day - timedelta(days=day.weekday())


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_range(day: date) -> tuple[date, date]:
    """First and last calendar day of the month containing `day`."""
    day = as_date(day)
    first = day.replace(day=1)
    return first, first.replace(day=days_in_month(day.year, day.month))


def iter_days(start: date, end: date):
    """Every calendar day in [start, end]; nothing when end < start."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def parse_week_reference(ref: str) -> WeekReference:
    """
    Decode a stored week reference in either encoding.

    Disambiguation: if the first two digits are "20" and the first four form
    a year in [2000, 2099] the string is read as legacy YYYYWW; otherwise, if
    the first two digits are a valid week, as WWYYYY. This misreads a WWYYYY
    string for week 20 of years 2000-2099 ("202025" is legacy week 25 of 2020).
    Strings sent by clients go through read_week_reference instead.

    Raises:
        InvalidFormatError: wrong length, non-digit characters, or week/year
            out of range.
    """
    if not isinstance(ref, str) or len(ref) != WEEK_REF_LENGTH:
        raise InvalidFormatError("expected exactly 6 characters", value=ref)
    if not (ref.isascii() and ref.isdigit()):
        raise InvalidFormatError("expected digits only", value=ref)

    first_two = int(ref[:2])
    first_four = int(ref[:4])

    if first_two == 20 and 2000 <= first_four <= 2099:
        year, week = first_four, int(ref[4:])
    elif MIN_WEEK <= first_two <= MAX_WEEK:
        week, year = first_two, int(ref[2:])
    else:
        raise InvalidFormatError("leading digits are neither a week nor a 20xx year", value=ref)

    if not MIN_WEEK <= week <= MAX_WEEK:
        raise InvalidFormatError(f"week {week} outside [{MIN_WEEK}, {MAX_WEEK}]", value=ref)
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidFormatError(f"year {year} outside [{MIN_YEAR}, {MAX_YEAR}]", value=ref)

    return WeekReference(week=week, year=year)


def week_reference_from_parts(week: int, year: int) -> WeekReference:
    """Build a reference from a week number and year; no string decoding involved."""
    if not MIN_WEEK <= week <= MAX_WEEK:
        raise InvalidFormatError(f"week {week} outside [{MIN_WEEK}, {MAX_WEEK}]", value=f"{week:02d}{year:04d}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidFormatError(f"year {year} outside [{MIN_YEAR}, {MAX_YEAR}]", value=f"{week:02d}{year:04d}")
    return WeekReference(week=week, year=year)


def read_week_reference(ref: str) -> WeekReference:
    """
    Decode a reference sent by a client.

    Clients write WWYYYY, so a string that is a valid WWYYYY reference is read
    that way even when it also looks like legacy YYYYWW ("202025" is week 20
    of 2025 here). Anything else goes through parse_week_reference, which
    still accepts legacy strings such as "202542".
    """
    if isinstance(ref, str) and len(ref) == WEEK_REF_LENGTH and ref.isascii() and ref.isdigit():
        week, year = int(ref[:2]), int(ref[2:])
        if MIN_WEEK <= week <= MAX_WEEK and MIN_YEAR <= year <= MAX_YEAR:
            return WeekReference(week=week, year=year)
    return parse_week_reference(ref)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def week_of(today: date) -> WeekReference:
    """The week containing `today`, numbered in its owning year."""
    monday = monday_on_or_before(today)
    next_jan1 = date(monday.year + 1, 1, 1)
    if monday + timedelta(days=6) >= next_jan1:
        return WeekReference(week=1, year=next_jan1.year)

    first_monday = monday_on_or_before(date(monday.year, 1, 1))
    week = (monday - first_monday).days // 7 + 1
    return WeekReference(week=week, year=monday.year)


def current_week_reference(today: date) -> str:
    return week_of(today).encode()


def week_range_for(week_ref: WeekReference) -> WeekRange:
    first_monday = monday_on_or_before(date(week_ref.year, 1, 1))
    start = first_monday + timedelta(weeks=week_ref.week - 1)
    return WeekRange(start=start, end=start + timedelta(days=6))


def resolve_week_range(ref: str | WeekReference) -> WeekRange:
    if isinstance(ref, WeekReference):
        return week_range_for(ref)
    return week_range_for(parse_week_reference(ref))
