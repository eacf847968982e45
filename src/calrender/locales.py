"""Preloaded month and weekday name tables keyed by locale tag."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"


@dataclass(frozen=True)
class LocaleNames:
    """Localized names. Weekday tuples start on Monday, matching ``date.weekday()``."""

    tag: str
    months: tuple[str, ...]
    weekdays: tuple[str, ...]

    def month_name(self, month: int) -> str:
        return self.months[month - 1]

    def weekday_abbreviation(self, weekday: int, length: int = 2) -> str:
        return self.weekdays[weekday][:length]


_TABLES = MappingProxyType(
    {
        "en": LocaleNames(
            tag="en",
            months=(
                "January",
                "February",
                "March",
                "April",
                "May",
                "June",
                "July",
                "August",
                "September",
                "October",
                "November",
                "December",
            ),
            weekdays=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
        ),
        "es": LocaleNames(
            tag="es",
            months=(
                "enero",
                "febrero",
                "marzo",
                "abril",
                "mayo",
                "junio",
                "julio",
                "agosto",
                "septiembre",
                "octubre",
                "noviembre",
                "diciembre",
            ),
            weekdays=("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"),
        ),
        "fr": LocaleNames(
            tag="fr",
            months=(
                "janvier",
                "février",
                "mars",
                "avril",
                "mai",
                "juin",
                "juillet",
                "août",
                "septembre",
                "octobre",
                "novembre",
                "décembre",
            ),
            weekdays=("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"),
        ),
        "de": LocaleNames(
            tag="de",
            months=(
                "Januar",
                "Februar",
                "März",
                "April",
                "Mai",
                "Juni",
                "Juli",
                "August",
                "September",
                "Oktober",
                "November",
                "Dezember",
            ),
            weekdays=(
                "Montag",
                "Dienstag",
                "Mittwoch",
                "Donnerstag",
                "Freitag",
                "Samstag",
                "Sonntag",
            ),
        ),
        "it": LocaleNames(
            tag="it",
            months=(
                "gennaio",
                "febbraio",
                "marzo",
                "aprile",
                "maggio",
                "giugno",
                "luglio",
                "agosto",
                "settembre",
                "ottobre",
                "novembre",
                "dicembre",
            ),
            weekdays=(
                "lunedì",
                "martedì",
                "mercoledì",
                "giovedì",
                "venerdì",
                "sabato",
                "domenica",
            ),
        ),
        "pt": LocaleNames(
            tag="pt",
            months=(
                "janeiro",
                "fevereiro",
                "março",
                "abril",
                "maio",
                "junho",
                "julho",
                "agosto",
                "setembro",
                "outubro",
                "novembro",
                "dezembro",
            ),
            weekdays=(
                "segunda-feira",
                "terça-feira",
                "quarta-feira",
                "quinta-feira",
                "sexta-feira",
                "sábado",
                "domingo",
            ),
        ),
        "nl": LocaleNames(
            tag="nl",
            months=(
                "januari",
                "februari",
                "maart",
                "april",
                "mei",
                "juni",
                "juli",
                "augustus",
                "september",
                "oktober",
                "november",
                "december",
            ),
            weekdays=(
                "maandag",
                "dinsdag",
                "woensdag",
                "donderdag",
                "vrijdag",
                "zaterdag",
                "zondag",
            ),
        ),
    }
)


def available_locales() -> tuple[str, ...]:
    return tuple(sorted(_TABLES))


def locale_names(tag: str | None) -> LocaleNames:
    """Return the name table for ``tag`` (e.g. ``fr-CA``), falling back to English."""
    if not tag:
        return _TABLES[DEFAULT_LOCALE]
    language = tag.replace("_", "-").split("-", 1)[0].lower()
    names = _TABLES.get(language)
    if names is None:
        logger.debug("no name table for locale '%s'; using %s", tag, DEFAULT_LOCALE)
        return _TABLES[DEFAULT_LOCALE]
    return names
