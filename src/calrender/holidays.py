"""Named holiday sets with display names and emoji."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from .astronomy import SeasonType, seasonal_events
from .hebrew import hebrew_to_gregorian, month_names

logger = logging.getLogger(__name__)

# Rata die of 1 Muharram AH 1 in the tabular Islamic calendar.
ISLAMIC_EPOCH = 227015


@dataclass(frozen=True)
class Holiday:
    name: str
    emoji: str


def nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    """Return the ``n``-th ``weekday`` (Monday=0) of a month, counting from 1."""
    first_weekday, _ = calendar.monthrange(year, month)
    offset = (weekday - first_weekday) % 7
    return date(year, month, 1 + offset + 7 * (n - 1))


def last_weekday(year: int, month: int, weekday: int) -> date:
    last_weekday_of_month, days = calendar.monthrange(year, month)
    last_weekday_of_month = (last_weekday_of_month + days - 1) % 7
    return date(year, month, days - (last_weekday_of_month - weekday) % 7)


def easter_sunday(year: int) -> date:
    """Western Easter via the anonymous Gregorian computus."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def _us_holidays(year: int) -> dict[date, Holiday]:
    return {
        date(year, 1, 1): Holiday("New Year's Day", "🎉"),
        nth_weekday(year, 1, calendar.MONDAY, 3): Holiday("MLK Day", "🕊️"),
        nth_weekday(year, 2, calendar.MONDAY, 3): Holiday("Presidents' Day", "🏛️"),
        last_weekday(year, 5, calendar.MONDAY): Holiday("Memorial Day", "🎖️"),
        date(year, 7, 4): Holiday("Independence Day", "🇺🇸"),
        nth_weekday(year, 9, calendar.MONDAY, 1): Holiday("Labor Day", "👷"),
        date(year, 10, 31): Holiday("Halloween", "🎃"),
        date(year, 11, 11): Holiday("Veterans Day", "🎖️"),
        nth_weekday(year, 11, calendar.THURSDAY, 4): Holiday("Thanksgiving", "🦃"),
        date(year, 12, 25): Holiday("Christmas", "🎄"),
    }


def _christian_holidays(year: int) -> dict[date, Holiday]:
    easter = easter_sunday(year)
    return {
        date(year, 1, 6): Holiday("Epiphany", "⭐"),
        easter - timedelta(days=46): Holiday("Ash Wednesday", "✝️"),
        easter - timedelta(days=7): Holiday("Palm Sunday", "🌿"),
        easter - timedelta(days=2): Holiday("Good Friday", "🐟"),
        easter: Holiday("Easter", "🐑"),
        easter + timedelta(days=39): Holiday("Ascension", "☁️"),
        easter + timedelta(days=49): Holiday("Pentecost", "🕊️"),
        date(year, 11, 1): Holiday("All Saints", "👼"),
        date(year, 12, 24): Holiday("Christmas Eve", "🕯️"),
        date(year, 12, 25): Holiday("Christmas", "🎄"),
    }


def _canadian_holidays(year: int) -> dict[date, Holiday]:
    victoria_day = date(year, 5, 24)
    victoria_day -= timedelta(days=victoria_day.weekday())
    return {
        date(year, 1, 1): Holiday("New Year's Day", "🎉"),
        nth_weekday(year, 2, calendar.MONDAY, 3): Holiday("Family Day", "👨‍👩‍👧‍👦"),
        easter_sunday(year) - timedelta(days=2): Holiday("Good Friday", "🐟"),
        victoria_day: Holiday("Victoria Day", "👑"),
        date(year, 7, 1): Holiday("Canada Day", "🍁"),
        nth_weekday(year, 9, calendar.MONDAY, 1): Holiday("Labour Day", "👷"),
        nth_weekday(year, 10, calendar.MONDAY, 2): Holiday("Thanksgiving", "🦃"),
        date(year, 11, 11): Holiday("Remembrance Day", "🎖️"),
        date(year, 12, 25): Holiday("Christmas", "🎄"),
        date(year, 12, 26): Holiday("Boxing Day", "🎁"),
    }


def _uk_holidays(year: int) -> dict[date, Holiday]:
    easter = easter_sunday(year)
    return {
        date(year, 1, 1): Holiday("New Year's Day", "🎉"),
        easter - timedelta(days=2): Holiday("Good Friday", "🐟"),
        easter + timedelta(days=1): Holiday("Easter Monday", "🐰"),
        nth_weekday(year, 5, calendar.MONDAY, 1): Holiday("Early May", "🌸"),
        last_weekday(year, 5, calendar.MONDAY): Holiday("Spring Bank", "🌷"),
        last_weekday(year, 8, calendar.MONDAY): Holiday("Summer Bank", "☀️"),
        date(year, 12, 25): Holiday("Christmas", "🎄"),
        date(year, 12, 26): Holiday("Boxing Day", "🎁"),
    }


def _major_world_holidays(year: int) -> dict[date, Holiday]:
    return {
        date(year, 1, 1): Holiday("New Year's Day", "🎉"),
        date(year, 2, 14): Holiday("Valentine's Day", "❤️"),
        date(year, 3, 17): Holiday("St. Patrick's Day", "☘️"),
        easter_sunday(year): Holiday("Easter", "🐰"),
        date(year, 4, 22): Holiday("Earth Day", "🌍"),
        date(year, 5, 1): Holiday("Workers' Day", "👷"),
        date(year, 10, 31): Holiday("Halloween", "🎃"),
        date(year, 12, 25): Holiday("Christmas", "🎄"),
        date(year, 12, 31): Holiday("New Year's Eve", "🎉"),
    }


def _mexican_holidays(year: int) -> dict[date, Holiday]:
    return {
        date(year, 1, 1): Holiday("Año Nuevo", "🎉"),
        nth_weekday(year, 2, calendar.MONDAY, 1): Holiday("Día de la Constitución", "📜"),
        nth_weekday(year, 3, calendar.MONDAY, 3): Holiday("Natalicio de Juárez", "🏛️"),
        date(year, 5, 1): Holiday("Día del Trabajo", "👷"),
        date(year, 5, 5): Holiday("Cinco de Mayo", "🇲🇽"),
        date(year, 9, 16): Holiday("Independencia", "🇲🇽"),
        date(year, 11, 2): Holiday("Día de Muertos", "💀"),
        nth_weekday(year, 11, calendar.MONDAY, 3): Holiday("Revolución", "🎖️"),
        date(year, 12, 12): Holiday("Virgen de Guadalupe", "🌹"),
        date(year, 12, 25): Holiday("Navidad", "🎄"),
    }


def _secular_holidays(year: int) -> dict[date, Holiday]:
    return {
        date(year, 2, 2): Holiday("Groundhog Day", "🦫"),
        date(year, 2, 14): Holiday("Valentine's Day", "❤️"),
        date(year, 3, 14): Holiday("Pi Day", "🥧"),
        date(year, 4, 1): Holiday("April Fools", "🃏"),
        date(year, 4, 22): Holiday("Earth Day", "🌍"),
        nth_weekday(year, 5, calendar.SUNDAY, 2): Holiday("Mother's Day", "💐"),
        nth_weekday(year, 6, calendar.SUNDAY, 3): Holiday("Father's Day", "👔"),
        date(year, 10, 31): Holiday("Halloween", "🎃"),
        date(year, 12, 31): Holiday("New Year's Eve", "🎉"),
    }


_PAGAN_SEASONS = {
    SeasonType.SPRING_EQUINOX: Holiday("Ostara", "🐣"),
    SeasonType.SUMMER_SOLSTICE: Holiday("Litha", "☀️"),
    SeasonType.AUTUMN_EQUINOX: Holiday("Mabon", "🍂"),
    SeasonType.WINTER_SOLSTICE: Holiday("Yule", "🌲"),
}


def _pagan_holidays(year: int) -> dict[date, Holiday]:
    holidays = {
        date(year, 2, 1): Holiday("Imbolc", "🕯️"),
        date(year, 5, 1): Holiday("Beltane", "🔥"),
        date(year, 8, 1): Holiday("Lughnasadh", "🌾"),
        date(year, 10, 31): Holiday("Samhain", "🎃"),
    }
    for event in seasonal_events(year):
        holidays[event.day] = _PAGAN_SEASONS[event.type]
    return holidays


# (month name, day, holiday); "Adar" resolves to Adar II in leap years.
_JEWISH_FIXED = (
    ("Tishrei", 1, Holiday("Rosh Hashanah", "🍎")),
    ("Tishrei", 10, Holiday("Yom Kippur", "🕍")),
    ("Tishrei", 15, Holiday("Sukkot", "🌿")),
    ("Tishrei", 23, Holiday("Simchat Torah", "📜")),
    ("Kislev", 25, Holiday("Chanukah", "🕎")),
    ("Shevat", 15, Holiday("Tu BiShvat", "🌳")),
    ("Adar", 14, Holiday("Purim", "🎭")),
    ("Nisan", 15, Holiday("Passover", "🍷")),
    ("Iyar", 18, Holiday("Lag BaOmer", "🔥")),
    ("Sivan", 6, Holiday("Shavuot", "🌾")),
    ("Av", 9, Holiday("Tisha B'Av", "🕯️")),
)


def _jewish_holidays(year: int) -> dict[date, Holiday]:
    holidays: dict[date, Holiday] = {}
    for hebrew_year in (year + 3760, year + 3761):
        names = month_names(hebrew_year)
        for month_name, day, holiday in _JEWISH_FIXED:
            if month_name == "Adar" and "Adar II" in names:
                month_name = "Adar II"
            try:
                gregorian = hebrew_to_gregorian(hebrew_year, names.index(month_name) + 1, day)
            except (ValueError, OverflowError):
                # Falls outside the Gregorian calendar, so never inside ``year``.
                continue
            if gregorian.year == year:
                holidays[gregorian] = holiday
    return holidays


def islamic_to_gregorian(year: int, month: int, day: int) -> date:
    """Convert a tabular Islamic date to Gregorian."""
    ordinal = (
        ISLAMIC_EPOCH
        - 1
        + (year - 1) * 354
        + (3 + 11 * year) // 30
        + 29 * (month - 1)
        + month // 2
        + day
    )
    return date.fromordinal(ordinal)


_ISLAMIC_FIXED = (
    (1, 1, Holiday("Islamic New Year", "🌙")),
    (1, 10, Holiday("Ashura", "🤲")),
    (3, 12, Holiday("Mawlid", "🕌")),
    (9, 1, Holiday("Ramadan Begins", "🌙")),
    (10, 1, Holiday("Eid al-Fitr", "☪️")),
    (12, 10, Holiday("Eid al-Adha", "🐑")),
)


def _islamic_holidays(year: int) -> dict[date, Holiday]:
    holidays: dict[date, Holiday] = {}
    # 10631 days per 30-year cycle; the Hijri year in progress on 1 January.
    current = (date(year, 1, 1).toordinal() - ISLAMIC_EPOCH) * 30 // 10631 + 1
    for hijri_year in range(current - 1, current + 2):
        for month, day, holiday in _ISLAMIC_FIXED:
            try:
                gregorian = islamic_to_gregorian(hijri_year, month, day)
            except (ValueError, OverflowError):
                continue
            if gregorian.year == year:
                holidays[gregorian] = holiday
    return holidays


HOLIDAY_SETS: dict[str, Callable[[int], dict[date, Holiday]]] = {
    "us": _us_holidays,
    "jewish": _jewish_holidays,
    "christian": _christian_holidays,
    "islamic": _islamic_holidays,
    "canadian": _canadian_holidays,
    "uk": _uk_holidays,
    "major_world": _major_world_holidays,
    "mexican": _mexican_holidays,
    "pagan": _pagan_holidays,
    "secular": _secular_holidays,
}

HOLIDAY_SET_ALIASES = {
    "hebrew": "jewish",
    "muslim": "islamic",
    "ca": "canadian",
    "mx": "mexican",
    "wiccan": "pagan",
    "fun": "secular",
}


def available_holiday_sets() -> tuple[str, ...]:
    return tuple(sorted(HOLIDAY_SETS))


def resolve_holiday_set_id(set_id: str) -> str | None:
    """Map a set id or alias to its canonical id, or None when unknown."""
    key = set_id.strip().lower()
    if key in HOLIDAY_SETS:
        return key
    return HOLIDAY_SET_ALIASES.get(key)


def holidays_for_set(year: int, set_id: str) -> dict[date, Holiday]:
    """Return the holidays of one named set in ``year``."""
    resolved = resolve_holiday_set_id(set_id)
    if resolved is None:
        logger.warning("ignoring unknown holiday set '%s'", set_id)
        return {}
    return HOLIDAY_SETS[resolved](year)


def holidays_for_sets(year: int, set_ids: Iterable[str]) -> dict[date, Holiday]:
    """Merge several holiday sets; the first set listed wins on shared dates."""
    merged: dict[date, Holiday] = {}
    for set_id in set_ids:
        for day, holiday in holidays_for_set(year, set_id).items():
            merged.setdefault(day, holiday)
    logger.debug("resolved %d holiday dates for %d", len(merged), year)
    return merged
