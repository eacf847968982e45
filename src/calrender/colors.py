"""Cell background colors for calendar themes."""

from __future__ import annotations

import calendar
import math
from datetime import date
from typing import TYPE_CHECKING

from .config import TRANSPARENT
from .themes import (
    RAINBOW_DAY_THEMES,
    Flat,
    LookupTable1D,
    LookupTable2D,
    RainbowByDayOfMonth,
    RainbowByDistanceFromYearEnd,
    RainbowByWeekday,
    RainbowWeekends,
    Theme,
)

if TYPE_CHECKING:
    from .options import Configuration


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    """Convert HSL (degrees, percent, percent) to a lowercase ``#rrggbb`` string."""
    hue = hue % 360
    s = min(max(saturation, 0.0), 100.0) / 100
    l = min(max(lightness, 0.0), 100.0) / 100  # noqa: E741

    chroma = (1 - abs(2 * l - 1)) * s
    x = chroma * (1 - abs((hue / 60) % 2 - 1))
    m = l - chroma / 2

    sector = int(hue // 60)
    if sector == 0:
        red, green, blue = chroma, x, 0.0
    elif sector == 1:
        red, green, blue = x, chroma, 0.0
    elif sector == 2:
        red, green, blue = 0.0, chroma, x
    elif sector == 3:
        red, green, blue = 0.0, x, chroma
    elif sector == 4:
        red, green, blue = x, 0.0, chroma
    else:
        red, green, blue = chroma, 0.0, x

    return "#{:02x}{:02x}{:02x}".format(
        round((red + m) * 255),
        round((green + m) * 255),
        round((blue + m) * 255),
    )


def day_of_month_hue(day_of_month: int) -> int:
    return int(day_of_month / 30 * 360)


def _distance_lightness(theme: RainbowByDistanceFromYearEnd, month: int, day_of_month: int) -> int:
    # Distance in (weighted month, day) space from December 31.
    distance = math.hypot((12 - month) * theme.month_weight, 31 - day_of_month)
    max_distance = math.hypot(11 * theme.month_weight, 30)
    normalized = min(distance / max_distance, 1.0)
    span = theme.max_lightness - theme.min_lightness
    return int(theme.min_lightness + (1 - normalized) * span)


def _rainbow_day_color(theme: Theme, day: date, month: int, day_of_month: int) -> str:
    if isinstance(theme, RainbowByWeekday):
        return hsl_to_hex(day.isoweekday() * 30, theme.saturation, theme.lightness)
    if isinstance(theme, RainbowByDayOfMonth):
        return hsl_to_hex(day_of_month_hue(day_of_month), theme.saturation, theme.lightness)
    if isinstance(theme, RainbowByDistanceFromYearEnd):
        return hsl_to_hex(
            day_of_month_hue(day_of_month),
            theme.saturation,
            _distance_lightness(theme, month, day_of_month),
        )
    msg = f"theme '{theme.name}' does not color every day."
    raise TypeError(msg)


def theme_weekend_color(theme: Theme, day: date, month: int, weekend_index: int) -> str | None:
    """Return the theme's own color for a weekend cell, if it has one."""
    if isinstance(theme, Flat):
        return theme.colors.weekend_background or None
    if isinstance(theme, RainbowWeekends):
        return hsl_to_hex(day_of_month_hue(day.day), theme.saturation, theme.lightness)
    if isinstance(theme, (LookupTable1D, LookupTable2D)):
        return theme.weekend_color(month, weekend_index)
    if isinstance(theme, RAINBOW_DAY_THEMES):
        return None
    msg = f"unsupported theme type '{type(theme).__name__}'."
    raise TypeError(msg)


def cell_color(
    config: Configuration,
    day: date,
    month: int,
    day_of_month: int,
    is_weekend: bool,
    weekend_index: int,
) -> str:
    """Return the background fill for one day cell.

    Rainbow day themes color every cell. Otherwise weekend cells get the
    ``weekend_bg_color`` override or the theme's weekend color when weekend
    highlighting is on, and everything else is transparent.
    """
    theme = config.palette
    if isinstance(theme, RAINBOW_DAY_THEMES):
        return _rainbow_day_color(theme, day, month, day_of_month)

    if not is_weekend or not config.highlight_weekends:
        return TRANSPARENT

    override = config.colors.weekend_bg_color
    if override:
        return override

    return theme_weekend_color(theme, day, month, weekend_index) or TRANSPARENT


def is_weekend(day: date) -> bool:
    return day.weekday() in (calendar.SATURDAY, calendar.SUNDAY)


def weekend_index(day: date) -> int:
    """Return the 0-based count of weekend days in ``day``'s month up to ``day``.

    Every Saturday and Sunday advances the index, so the first weekend day of a
    month is 0 and its second is 1. Weekdays before the first weekend get 0.
    """
    weekend_days = sum(
        1 for day_of_month in range(1, day.day + 1) if is_weekend(day.replace(day=day_of_month))
    )
    return max(weekend_days - 1, 0)
