"""Theme variants, built-in theme table and theme file overrides."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from reportlab.lib import colors

logger = logging.getLogger(__name__)

DEFAULT_THEME = "default"


@dataclass(frozen=True)
class ThemeColors:
    """Serializable per-theme text and background colors."""

    text: str = "#000000"
    background: str = "#ffffff"
    weekend_background: str = "#f0f0f0"
    month_header: str = "#333333"
    weekday_header: str = "#666666"


@dataclass(frozen=True)
class Flat:
    """Weekends use one color from the theme colors."""

    name: str
    colors: ThemeColors = ThemeColors()


@dataclass(frozen=True)
class RainbowByWeekday:
    """Every cell gets a hue keyed by ISO weekday."""

    name: str
    colors: ThemeColors = ThemeColors()
    saturation: int = 100
    lightness: int = 90


@dataclass(frozen=True)
class RainbowByDayOfMonth:
    """Every cell gets a hue keyed by day of month."""

    name: str
    colors: ThemeColors = ThemeColors()
    saturation: int = 100
    lightness: int = 90


@dataclass(frozen=True)
class RainbowByDistanceFromYearEnd:
    """Day-of-month hue with lightness rising toward December 31."""

    name: str
    colors: ThemeColors = ThemeColors()
    saturation: int = 100
    min_lightness: int = 80
    max_lightness: int = 90
    month_weight: float = 3.0


@dataclass(frozen=True)
class RainbowWeekends:
    """Weekend cells get a day-of-month hue; weekdays stay transparent."""

    name: str
    colors: ThemeColors = ThemeColors()
    saturation: int = 100
    lightness: int = 90


@dataclass(frozen=True)
class LookupTable1D:
    """One weekend color per month."""

    name: str
    table: tuple[str, ...]
    colors: ThemeColors = ThemeColors()

    def weekend_color(self, month: int, weekend_index: int) -> str:
        return self.table[month - 1]


@dataclass(frozen=True)
class LookupTable2D:
    """Per month, an ordered list of weekend colors indexed by weekend occurrence."""

    name: str
    table: tuple[tuple[str, ...], ...]
    colors: ThemeColors = ThemeColors()

    def weekend_color(self, month: int, weekend_index: int) -> str:
        month_colors = self.table[month - 1]
        if 0 <= weekend_index < len(month_colors):
            return month_colors[weekend_index]
        return month_colors[0]


Theme = (
    Flat
    | RainbowByWeekday
    | RainbowByDayOfMonth
    | RainbowByDistanceFromYearEnd
    | RainbowWeekends
    | LookupTable1D
    | LookupTable2D
)

RAINBOW_DAY_THEMES = (RainbowByWeekday, RainbowByDayOfMonth, RainbowByDistanceFromYearEnd)


def _repeat(color: str, count: int = 10) -> tuple[str, ...]:
    return (color,) * count


_VERMONT_WEEKENDS = (
    _repeat("#E8F1F2"),
    _repeat("#F0F8FF"),
    _repeat("#E9F7EF", 8) + _repeat("#d1a4fd", 2),
    ("#7CFC00",) + _repeat("#c8fc9f", 8) + ("#d1a4fd",),
    (
        "#82E0AA",
        "#D0ECE7",
        "#A2D9CE",
        "#73C6B6",
        "#45B39D",
        "#58D68D",
        "#82E0AA",
        "#ABEBC6",
        "#D5F5E3",
        "#FEF9E7",
    ),
    _repeat("#66CDAA"),
    _repeat("#3CB371"),
    _repeat("#5bf0ff"),
    ("#FAD7A0", "#F8C471", "#F5B041") + _repeat("#F39C12", 5) + _repeat("#FFD700", 2),
    (
        "#FF4500",
        "#FF8C00",
        "#DAA520",
        "rgba(180,120,60,0.4)",
        "rgba(190,130,70,0.4)",
        "rgba(200,140,80,0.4)",
        "rgba(210,160,100,0.4)",
        "rgba(225,190,140,0.4)",
        "#C0C0C0",
        "#808080",
    ),
    _repeat("rgba(161,161,161,0.30)"),
    _repeat("rgba(161,161,161,0.6)"),
)

_LAKESHORE_WEEKENDS = (
    "#e3f2fd",
    "#e1f5fe",
    "#b3e5fc",
    "#e0f7fa",
    "#b2ebf2",
    "#b2dfdb",
    "#80deea",
    "#84ffff",
    "#a7ffeb",
    "#b2dfdb",
    "#b3e5fc",
    "#bbdefb",
)

_SUNSET_WEEKENDS = (
    "#fce4ec",
    "#f8bbd0",
    "#ffcdd2",
    "#ffccbc",
    "#ffe0b2",
    "#fff8e1",
    "#ffecb3",
    "#ffe082",
    "#ffd180",
    "#ffab91",
    "#ffcdd2",
    "#f8bbd0",
)

_FOREST_WEEKENDS = (
    "#e8f5e9",
    "#c8e6c9",
    "#dcedc8",
    "#c5e1a5",
    "#aed581",
    "#c8e6c9",
    "#a5d6a7",
    "#b9f6ca",
    "#dcedc8",
    "#d7ccc8",
    "#efebe9",
    "#e8f5e9",
)

_BUILTIN_THEMES: dict[str, Theme] = {
    "default": Flat(name="default"),
    "rainbowDays": RainbowByDayOfMonth(name="rainbowDays"),
    "rainbowDays1": RainbowByWeekday(name="rainbowDays1"),
    "rainbowDays2": RainbowByDayOfMonth(name="rainbowDays2", lightness=80),
    "rainbowDays3": RainbowByDistanceFromYearEnd(name="rainbowDays3"),
    "rainbowWeekends": RainbowWeekends(
        name="rainbowWeekends",
        colors=ThemeColors(month_header="#e91e63", weekday_header="#9c27b0"),
    ),
    "vermontWeekends": LookupTable2D(
        name="vermontWeekends",
        table=_VERMONT_WEEKENDS,
        colors=ThemeColors(month_header="#1b5e20", weekday_header="#2e7d32"),
    ),
    "lakeshoreWeekends": LookupTable1D(
        name="lakeshoreWeekends",
        table=_LAKESHORE_WEEKENDS,
        colors=ThemeColors(month_header="#1565c0", weekday_header="#1976d2"),
    ),
    "sunsetWeekends": LookupTable1D(
        name="sunsetWeekends",
        table=_SUNSET_WEEKENDS,
        colors=ThemeColors(month_header="#e65100", weekday_header="#ef6c00"),
    ),
    "forestWeekends": LookupTable1D(
        name="forestWeekends",
        table=_FOREST_WEEKENDS,
        colors=ThemeColors(month_header="#2e7d32", weekday_header="#388e3c"),
    ),
}


def available_themes() -> tuple[str, ...]:
    """Return built-in theme names."""
    return tuple(sorted(_BUILTIN_THEMES))


def resolve_theme(
    name: str | None = DEFAULT_THEME,
    *,
    theme_file: str | Path | None = None,
) -> Theme:
    """Resolve a theme name, falling back to the default theme for unknown names.

    ``theme_file`` is a JSON object overriding fields of ThemeColors.
    """
    theme = _BUILTIN_THEMES.get(name or DEFAULT_THEME)
    if theme is None:
        logger.warning("unknown theme '%s'; falling back to '%s'", name, DEFAULT_THEME)
        theme = _BUILTIN_THEMES[DEFAULT_THEME]
    if theme_file is not None:
        theme = replace(theme, colors=replace(theme.colors, **_load_theme_file(Path(theme_file))))
    return theme


def _load_theme_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        msg = f"theme file '{path}' does not exist."
        raise ValueError(msg)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"theme file '{path}' is not valid JSON: {exc}."
        raise ValueError(msg) from exc

    if not isinstance(payload, dict):
        msg = "theme file content must be a JSON object."
        raise ValueError(msg)

    allowed = set(ThemeColors.__dataclass_fields__)
    unknown = sorted(key for key in payload if key not in allowed)
    if unknown:
        msg = f"unknown theme key(s): {', '.join(unknown)}."
        raise ValueError(msg)

    return {key: _validate_color(value, key=key) for key, value in payload.items()}


def validate_color(raw_value: str) -> str:
    """Return ``raw_value`` when reportlab can parse it as a color."""
    try:
        if raw_value.startswith("#"):
            colors.HexColor(raw_value)
        else:
            colors.toColor(raw_value)
    except Exception as exc:  # noqa: BLE001
        msg = f"invalid color value '{raw_value}'."
        raise ValueError(msg) from exc
    return raw_value


def _validate_color(raw_value: Any, *, key: str) -> str:
    if not isinstance(raw_value, str) or not raw_value.strip():
        msg = f"theme key '{key}' must be a non-empty color string."
        raise ValueError(msg)
    try:
        return validate_color(raw_value)
    except ValueError as exc:
        msg = f"invalid color value '{raw_value}' for theme key '{key}'."
        raise ValueError(msg) from exc
