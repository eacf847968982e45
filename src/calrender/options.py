"""Calendar configuration values and JSON parsing with defaults."""

from __future__ import annotations

import calendar
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .astronomy import resolve_timezone
from .config import (
    DEFAULT_CUSTOM_DATE_COLOR,
    DEFAULT_EMOJI_ANCHOR,
    DEFAULT_HOLIDAY_COLOR,
    DEFAULT_MOON_BORDER_COLOR,
    DEFAULT_MOON_BORDER_WIDTH,
    DEFAULT_MOON_DARK_COLOR,
    DEFAULT_MOON_LIGHT_COLOR,
    DEFAULT_MOON_OFFSET_X,
    DEFAULT_MOON_OFFSET_Y,
    DEFAULT_MOON_SIZE,
    EVENT_DISPLAY_MODES,
    MAX_YEAR,
    MIN_YEAR,
    MOON_BORDER_WIDTH_RANGE,
    MOON_DISPLAY_MODES,
    MOON_SIZE_RANGE,
)
from .errors import ConfigurationError
from .themes import Theme, resolve_theme, validate_color

logger = logging.getLogger(__name__)

BOOL_TRUE = {"1", "true", "yes", "on"}
BOOL_FALSE = {"0", "false", "no", "off"}

WEEKDAY_NAMES = {
    "monday": calendar.MONDAY,
    "tuesday": calendar.TUESDAY,
    "wednesday": calendar.WEDNESDAY,
    "thursday": calendar.THURSDAY,
    "friday": calendar.FRIDAY,
    "saturday": calendar.SATURDAY,
    "sunday": calendar.SUNDAY,
}


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(max(value, low), high)


@dataclass(frozen=True)
class DisplaySettings:
    """Per-entry placement overrides for custom dates; None keeps the mode default."""

    emoji_size: float | None = None
    emoji_x: float | None = None
    emoji_y: float | None = None
    text_size: float | None = None
    text_x: float | None = None
    text_y: float | None = None
    text_color: str | None = None
    text_align: str | None = None
    text_bold: bool = False
    text_wrap: bool = False
    text_rotation: float = 0.0


@dataclass(frozen=True)
class CustomDateEntry:
    emoji: str = ""
    title: str | None = None
    display: DisplaySettings | None = None


@dataclass(frozen=True)
class MoonSettings:
    """Moon artwork settings. Sizes are clamped, unknown modes fall back to ``none``."""

    display_mode: str = "none"
    size: float = DEFAULT_MOON_SIZE
    offset_x: float = DEFAULT_MOON_OFFSET_X
    offset_y: float = DEFAULT_MOON_OFFSET_Y
    border_width: float = DEFAULT_MOON_BORDER_WIDTH
    border_color: str = DEFAULT_MOON_BORDER_COLOR
    light_color: str = DEFAULT_MOON_LIGHT_COLOR
    dark_color: str = DEFAULT_MOON_DARK_COLOR
    latitude: float = 0.0
    longitude: float = 0.0

    def __post_init__(self) -> None:
        if self.display_mode not in MOON_DISPLAY_MODES:
            logger.warning("unknown moon display mode '%s'; using 'none'", self.display_mode)
            object.__setattr__(self, "display_mode", "none")
        object.__setattr__(self, "size", _clamp(self.size, MOON_SIZE_RANGE))
        object.__setattr__(self, "border_width", _clamp(self.border_width, MOON_BORDER_WIDTH_RANGE))
        object.__setattr__(self, "latitude", _clamp(self.latitude, (-90.0, 90.0)))
        object.__setattr__(self, "longitude", _clamp(self.longitude, (-180.0, 180.0)))


@dataclass(frozen=True)
class ColorOverrides:
    """User color overrides; None means use the theme color."""

    year_color: str | None = None
    month_color: str | None = None
    day_text_color: str | None = None
    day_name_color: str | None = None
    weekend_bg_color: str | None = None
    grid_line_color: str | None = None
    holiday_color: str = DEFAULT_HOLIDAY_COLOR
    custom_date_color: str = DEFAULT_CUSTOM_DATE_COLOR


def _current_year() -> int:
    return date.today().year


def _validate_year(year: int) -> None:
    if isinstance(year, bool) or not isinstance(year, int):
        msg = "year must be an integer."
        raise ConfigurationError(msg)
    if not MIN_YEAR <= year <= MAX_YEAR:
        msg = f"year must be between {MIN_YEAR} and {MAX_YEAR}."
        raise ConfigurationError(msg)


@dataclass(frozen=True)
class Configuration:
    """Everything needed to render one calendar year.

    ``palette`` is the theme variant resolved from ``theme``; pass one explicitly
    to apply theme-file overrides.
    """

    year: int = field(default_factory=_current_year)
    theme: str = "default"
    layout_style: str = "default"
    locale: str = "en"
    first_day_of_week: int = calendar.SUNDAY
    show_week_numbers: bool = False
    compact_mode: bool = False
    show_day_names: bool = True
    show_day_numbers: bool = True
    show_grid: bool = True
    highlight_weekends: bool = True
    rotate_month_names: bool = False
    moon: MoonSettings = field(default_factory=MoonSettings)
    colors: ColorOverrides = field(default_factory=ColorOverrides)
    emoji_font: str | None = None
    emoji_position: str = DEFAULT_EMOJI_ANCHOR
    event_display_mode: str = "large"
    holiday_sets: tuple[str, ...] = ()
    custom_dates: Mapping[date, tuple[CustomDateEntry, ...]] = field(default_factory=dict)
    time_zone: str = "UTC"
    palette: Theme | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        _validate_year(self.year)
        if not 0 <= self.first_day_of_week <= 6:
            msg = "first_day_of_week must be between 0 (Monday) and 6 (Sunday)."
            raise ConfigurationError(msg)
        if self.event_display_mode not in EVENT_DISPLAY_MODES:
            logger.warning(
                "unknown event display mode '%s'; using 'large'", self.event_display_mode
            )
            object.__setattr__(self, "event_display_mode", "large")
        try:
            resolve_timezone(self.time_zone)
        except (KeyError, ValueError):
            logger.warning("unknown time zone '%s'; using 'UTC'", self.time_zone)
            object.__setattr__(self, "time_zone", "UTC")
        object.__setattr__(self, "holiday_sets", tuple(self.holiday_sets))
        object.__setattr__(
            self,
            "custom_dates",
            MappingProxyType({day: tuple(entries) for day, entries in self.custom_dates.items()}),
        )
        if self.palette is None or self.palette.name != self.theme:
            object.__setattr__(self, "palette", resolve_theme(self.theme))


# JSON parsing


def _as_bool(raw_value: Any) -> bool:
    if isinstance(raw_value, bool):
        return raw_value
    normalized = str(raw_value).strip().lower()
    if normalized in BOOL_TRUE:
        return True
    if normalized in BOOL_FALSE:
        return False
    msg = f"expected a boolean (true/false), got '{raw_value}'."
    raise ValueError(msg)


def _as_float(raw_value: Any) -> float:
    if isinstance(raw_value, bool):
        msg = f"expected a number, got '{raw_value}'."
        raise ValueError(msg)
    try:
        return float(raw_value)
    except (TypeError, ValueError) as exc:
        msg = f"expected a number, got '{raw_value}'."
        raise ValueError(msg) from exc


def _as_str(raw_value: Any) -> str:
    if not isinstance(raw_value, str):
        msg = f"expected a string, got '{raw_value}'."
        raise ValueError(msg)
    return raw_value


def _as_optional_str(raw_value: Any) -> str | None:
    if raw_value is None:
        return None
    value = _as_str(raw_value).strip()
    return value or None


def _as_color(raw_value: Any) -> str:
    return validate_color(_as_str(raw_value).strip())


def _as_optional_color(raw_value: Any) -> str | None:
    value = _as_optional_str(raw_value)
    return None if value is None else validate_color(value)


def _as_weekday(raw_value: Any) -> int:
    if isinstance(raw_value, int) and not isinstance(raw_value, bool):
        if 0 <= raw_value <= 6:
            return raw_value
    elif isinstance(raw_value, str):
        key = raw_value.strip().lower()
        for name, weekday in WEEKDAY_NAMES.items():
            if len(key) >= 3 and name.startswith(key):
                return weekday
    msg = f"expected a weekday name, got '{raw_value}'."
    raise ValueError(msg)


Coercer = Callable[[Any], Any]

_TOP_LEVEL_FIELDS: dict[str, tuple[str, Coercer]] = {
    "theme": ("theme", _as_str),
    "layoutStyle": ("layout_style", _as_str),
    "locale": ("locale", _as_str),
    "firstDayOfWeek": ("first_day_of_week", _as_weekday),
    "showWeekNumbers": ("show_week_numbers", _as_bool),
    "compactMode": ("compact_mode", _as_bool),
    "showDayNames": ("show_day_names", _as_bool),
    "showDayNumbers": ("show_day_numbers", _as_bool),
    "showGrid": ("show_grid", _as_bool),
    "highlightWeekends": ("highlight_weekends", _as_bool),
    "rotateMonthNames": ("rotate_month_names", _as_bool),
    "emojiFont": ("emoji_font", _as_optional_str),
    "emojiPosition": ("emoji_position", _as_str),
    "eventDisplayMode": ("event_display_mode", _as_str),
    "timeZone": ("time_zone", _as_str),
}

_MOON_FIELDS: dict[str, tuple[str, Coercer]] = {
    "moonDisplayMode": ("display_mode", _as_str),
    "moonSize": ("size", _as_float),
    "moonOffsetX": ("offset_x", _as_float),
    "moonOffsetY": ("offset_y", _as_float),
    "moonBorderWidth": ("border_width", _as_float),
    "moonBorderColor": ("border_color", _as_color),
    "moonLightColor": ("light_color", _as_color),
    "moonDarkColor": ("dark_color", _as_color),
    "latitude": ("latitude", _as_float),
    "longitude": ("longitude", _as_float),
}

_COLOR_FIELDS: dict[str, tuple[str, Coercer]] = {
    "yearColor": ("year_color", _as_optional_color),
    "monthColor": ("month_color", _as_optional_color),
    "dayTextColor": ("day_text_color", _as_optional_color),
    "dayNameColor": ("day_name_color", _as_optional_color),
    "weekendBgColor": ("weekend_bg_color", _as_optional_color),
    "gridLineColor": ("grid_line_color", _as_optional_color),
    "holidayColor": ("holiday_color", _as_color),
    "customDateColor": ("custom_date_color", _as_color),
}

_DISPLAY_FIELDS: dict[str, tuple[str, Coercer]] = {
    "emojiSize": ("emoji_size", _as_float),
    "emojiX": ("emoji_x", _as_float),
    "emojiY": ("emoji_y", _as_float),
    "textSize": ("text_size", _as_float),
    "textX": ("text_x", _as_float),
    "textY": ("text_y", _as_float),
    "textColor": ("text_color", _as_optional_color),
    "textAlign": ("text_align", _as_optional_str),
    "textBold": ("text_bold", _as_bool),
    "textWrap": ("text_wrap", _as_bool),
    "textRotation": ("text_rotation", _as_float),
}

_SPECIAL_KEYS = {"year", "holidaySets", "customDates"}
_NULLABLE = (_as_optional_str, _as_optional_color)


def _collect(
    payload: Mapping[str, Any], fields: Mapping[str, tuple[str, Coercer]]
) -> dict[str, Any]:
    collected: dict[str, Any] = {}
    for key, (field_name, coerce) in fields.items():
        if key not in payload or (payload[key] is None and coerce not in _NULLABLE):
            continue
        try:
            collected[field_name] = coerce(payload[key])
        except ValueError as exc:
            logger.warning("ignoring '%s': %s", key, exc)
    return collected


def _parse_year(raw_value: Any) -> int:
    if isinstance(raw_value, bool):
        msg = "year must be an integer."
        raise ConfigurationError(msg)
    try:
        year = int(raw_value)
    except (TypeError, ValueError) as exc:
        msg = f"year must be an integer, got '{raw_value}'."
        raise ConfigurationError(msg) from exc
    if isinstance(raw_value, float) and raw_value != year:
        msg = f"year must be an integer, got '{raw_value}'."
        raise ConfigurationError(msg)
    return year


def _parse_holiday_sets(raw_value: Any) -> tuple[str, ...]:
    if isinstance(raw_value, str):
        return (raw_value,)
    if not isinstance(raw_value, (list, tuple)):
        logger.warning("ignoring 'holidaySets': expected a list of set ids")
        return ()
    return tuple(item for item in raw_value if isinstance(item, str) and item.strip())


def _parse_display_settings(raw_value: Any) -> DisplaySettings | None:
    if not isinstance(raw_value, Mapping):
        return None
    values = _collect(raw_value, _DISPLAY_FIELDS)
    for key in ("emoji_x", "emoji_y", "text_x", "text_y"):
        if key in values:
            values[key] = _clamp(values[key], (0.0, 100.0))
    return DisplaySettings(**values)


def _parse_custom_entry(raw_value: Any) -> CustomDateEntry | None:
    if isinstance(raw_value, str):
        return CustomDateEntry(emoji=raw_value)
    if not isinstance(raw_value, Mapping):
        return None
    emoji = raw_value.get("emoji")
    title = raw_value.get("title")
    return CustomDateEntry(
        emoji=emoji if isinstance(emoji, str) else "",
        title=title if isinstance(title, str) and title else None,
        display=_parse_display_settings(raw_value.get("displaySettings")),
    )


def _parse_custom_dates(raw_value: Any) -> dict[date, tuple[CustomDateEntry, ...]]:
    if not isinstance(raw_value, Mapping):
        logger.warning("ignoring 'customDates': expected an object keyed by date")
        return {}

    parsed: dict[date, tuple[CustomDateEntry, ...]] = {}
    for raw_day, raw_entries in raw_value.items():
        try:
            day = date.fromisoformat(str(raw_day))
        except ValueError:
            logger.warning("ignoring custom date with invalid key '%s'", raw_day)
            continue
        items = raw_entries if isinstance(raw_entries, list) else [raw_entries]
        entries = tuple(
            entry for entry in (_parse_custom_entry(item) for item in items) if entry is not None
        )
        if entries:
            parsed[day] = parsed.get(day, ()) + entries
    return parsed


def parse_configuration(payload: Mapping[str, Any] | None = None) -> Configuration:
    """Build a Configuration from a JSON-style object.

    Absent keys take their defaults and unknown keys are ignored. Only a
    structurally invalid year raises.
    """
    payload = payload or {}
    if not isinstance(payload, Mapping):
        msg = "configuration must be a JSON object."
        raise ConfigurationError(msg)

    known = set(_TOP_LEVEL_FIELDS) | set(_MOON_FIELDS) | set(_COLOR_FIELDS) | _SPECIAL_KEYS
    unknown = sorted(key for key in payload if key not in known)
    if unknown:
        logger.debug("ignoring unknown configuration key(s): %s", ", ".join(unknown))

    values = _collect(payload, _TOP_LEVEL_FIELDS)
    if payload.get("year") is not None:
        values["year"] = _parse_year(payload["year"])
    if "holidaySets" in payload:
        values["holiday_sets"] = _parse_holiday_sets(payload["holidaySets"])
    if "customDates" in payload:
        values["custom_dates"] = _parse_custom_dates(payload["customDates"])

    return Configuration(
        moon=MoonSettings(**_collect(payload, _MOON_FIELDS)),
        colors=ColorOverrides(**_collect(payload, _COLOR_FIELDS)),
        **values,
    )


def load_configuration(path: str | Path) -> Configuration:
    """Read a JSON configuration file."""
    path = Path(path)
    if not path.exists():
        msg = f"configuration file '{path}' does not exist."
        raise ConfigurationError(msg)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"configuration file '{path}' is not valid JSON: {exc}."
        raise ConfigurationError(msg) from exc

    return parse_configuration(payload)
