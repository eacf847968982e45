"""Arithmetic Hebrew calendar and Gregorian day mapping.

Months are numbered in civil order starting from Tishrei. In leap years the
sixth month is Adar I and the seventh is Adar II; otherwise the sixth month is
Adar and the year has twelve months.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from functools import lru_cache

logger = logging.getLogger(__name__)

# Rata die (date.toordinal) of 1 Tishrei AM 1, less one.
HEBREW_EPOCH = -1373427

PARTS_PER_DAY = 25920

_COMMON_MONTHS = (
    "Tishrei",
    "Cheshvan",
    "Kislev",
    "Tevet",
    "Shevat",
    "Adar",
    "Nisan",
    "Iyar",
    "Sivan",
    "Tammuz",
    "Av",
    "Elul",
)
_LEAP_MONTHS = (
    "Tishrei",
    "Cheshvan",
    "Kislev",
    "Tevet",
    "Shevat",
    "Adar I",
    "Adar II",
    "Nisan",
    "Iyar",
    "Sivan",
    "Tammuz",
    "Av",
    "Elul",
)


@dataclass(frozen=True)
class HebrewDate:
    year: int
    month: int
    day: int

    @property
    def month_name(self) -> str:
        return month_names(self.year)[self.month - 1]

    def __str__(self) -> str:
        return f"{self.day} {self.month_name} {self.year}"


@dataclass(frozen=True)
class HebrewDateMapping:
    gregorian_date: date
    hebrew_date: str


def is_leap_year(year: int) -> bool:
    """Seven years of every 19-year Metonic cycle are leap years."""
    return (7 * year + 1) % 19 < 7


def months_in_year(year: int) -> int:
    return 13 if is_leap_year(year) else 12


def month_names(year: int) -> tuple[str, ...]:
    return _LEAP_MONTHS if is_leap_year(year) else _COMMON_MONTHS


@lru_cache(maxsize=512)
def _elapsed_days(year: int) -> int:
    months_elapsed = (235 * year - 234) // 19
    parts_elapsed = 12084 + 13753 * months_elapsed
    days = 29 * months_elapsed + parts_elapsed // PARTS_PER_DAY
    # Rosh Hashanah never falls on Sunday, Wednesday or Friday.
    if (3 * (days + 1)) % 7 < 3:
        days += 1
    return days


def _year_length_correction(year: int) -> int:
    previous_year = _elapsed_days(year - 1)
    this_year = _elapsed_days(year)
    next_year = _elapsed_days(year + 1)
    if next_year - this_year == 356:
        return 2
    if this_year - previous_year == 382:
        return 1
    return 0


def new_year_ordinal(year: int) -> int:
    """Return the proleptic Gregorian ordinal of 1 Tishrei."""
    return HEBREW_EPOCH + _elapsed_days(year) + _year_length_correction(year)


def days_in_year(year: int) -> int:
    return new_year_ordinal(year + 1) - new_year_ordinal(year)


def month_lengths(year: int) -> tuple[int, ...]:
    """Return the month lengths of ``year`` in civil order."""
    year_days = days_in_year(year)
    cheshvan = 30 if year_days % 10 == 5 else 29
    kislev = 29 if year_days % 10 == 3 else 30
    if is_leap_year(year):
        return (30, cheshvan, kislev, 29, 30, 30, 29, 30, 29, 30, 29, 30, 29)
    return (30, cheshvan, kislev, 29, 30, 29, 30, 29, 30, 29, 30, 29)


def days_in_month(year: int, month: int) -> int:
    return month_lengths(year)[month - 1]


def from_gregorian(day: date) -> HebrewDate:
    """Convert a Gregorian date to a Hebrew date."""
    ordinal = day.toordinal()
    year = day.year + 3761
    if ordinal < new_year_ordinal(year):
        year -= 1

    remaining = ordinal - new_year_ordinal(year)
    for month, length in enumerate(month_lengths(year), start=1):
        if remaining < length:
            return HebrewDate(year=year, month=month, day=remaining + 1)
        remaining -= length

    msg = f"date {day.isoformat()} falls outside Hebrew year {year}."
    raise ValueError(msg)


def hebrew_to_gregorian(year: int, month: int, day: int) -> date:
    """Convert a Hebrew date to Gregorian, clamping month and day into range."""
    month = min(max(month, 1), months_in_year(year))
    lengths = month_lengths(year)
    day = min(max(day, 1), lengths[month - 1])
    ordinal = new_year_ordinal(year) + sum(lengths[: month - 1]) + day - 1
    return date.fromordinal(ordinal)


def hebrew_date_string(day: date) -> str:
    return str(from_gregorian(day))


def hebrew_dates_for_year(year: int) -> list[HebrewDateMapping]:
    """Return one Hebrew date string for every Gregorian day of ``year``."""
    mappings: list[HebrewDateMapping] = []
    for ordinal in range(date(year, 1, 1).toordinal(), date(year, 12, 31).toordinal() + 1):
        current = date.fromordinal(ordinal)
        mappings.append(
            HebrewDateMapping(gregorian_date=current, hebrew_date=hebrew_date_string(current))
        )
    logger.debug("mapped %d Gregorian days of %d to Hebrew dates", len(mappings), year)
    return mappings
