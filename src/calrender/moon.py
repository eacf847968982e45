"""Moon illumination glyphs."""

from __future__ import annotations

import math
from datetime import date, datetime

from .astronomy import (
    SAMPLE_TIME,
    is_full_moon_day,
    is_moon_phase_day,
    moon_illumination,
    moon_position,
    resolve_timezone,
)
from .config import LARGE_MOON_MIN_SIZE
from .glyphs import quote_attr
from .options import Configuration


def should_show_moon(config: Configuration, day: date) -> bool:
    """Return whether ``day`` gets a moon glyph under the configured display mode."""
    mode = config.moon.display_mode
    if mode == "illumination":
        return True
    if mode == "phases":
        return is_moon_phase_day(day)
    if mode == "full-only":
        return is_full_moon_day(day)
    return False


def is_large_moon(config: Configuration) -> bool:
    return config.moon.display_mode != "none" and config.moon.size >= LARGE_MOON_MIN_SIZE


def terminator_path(phase: float, radius: float) -> str:
    """Return the lit region of a disc centered on the origin.

    The limb arc runs from the top to the bottom of the disc on the lit side and
    the terminator half-ellipse closes it back to the top. Waxing moons are lit
    on the right.
    """
    lit_right = phase < 0.5
    illuminated = (1 - math.cos(2 * math.pi * phase)) / 2
    semi_axis = abs(math.cos(2 * math.pi * phase)) * radius

    limb_sweep = 1 if lit_right else 0
    if illuminated < 0.5:
        terminator_sweep = 0 if lit_right else 1
    else:
        terminator_sweep = 1 if lit_right else 0

    return (
        f"M 0 {-radius:.2f} "
        f"A {radius:.2f} {radius:.2f} 0 0 {limb_sweep} 0 {radius:.2f} "
        f"A {semi_axis:.2f} {radius:.2f} 0 0 {terminator_sweep} 0 {-radius:.2f} Z"
    )


def generate_moon_illumination_svg(
    day: date,
    cx: float,
    cy: float,
    latitude: float,
    longitude: float,
    config: Configuration,
) -> str:
    """Return a bordered moon disc for ``day`` centered on (cx, cy).

    Away from the default (0, 0) location the disc is turned by the parallactic
    angle so the terminator tilts as seen by the observer.
    """
    settings = config.moon
    radius = settings.size / 2
    phase = moon_illumination(day).phase

    rotation = 0.0
    if latitude or longitude:
        local_noon = datetime.combine(day, SAMPLE_TIME, tzinfo=resolve_timezone(config.time_zone))
        position = moon_position(local_noon, latitude, longitude)
        rotation = -math.degrees(position.parallactic_angle)
    transform = f"translate({cx:.2f} {cy:.2f})"
    if rotation:
        transform += f" rotate({rotation:.2f})"

    border = ""
    if settings.border_width > 0:
        border = (
            f'<circle r="{radius:.2f}" fill="none" stroke="{quote_attr(settings.border_color)}" '
            f'stroke-width="{settings.border_width:g}"/>'
        )
    return (
        f'<g class="moon" transform="{transform}">'
        f'<circle r="{radius:.2f}" fill="{quote_attr(settings.dark_color)}"/>'
        f'<path d="{terminator_path(phase, radius)}" fill="{quote_attr(settings.light_color)}"/>'
        f"{border}</g>"
    )
