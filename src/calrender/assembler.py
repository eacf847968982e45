"""Assemble full-year calendar SVG documents."""

from __future__ import annotations

import logging
import re
from datetime import date
from xml.sax.saxutils import escape

from .colors import cell_color, is_weekend, weekend_index
from .config import (
    DEFAULT_GRID_LINE_COLOR,
    SVG_NAMESPACE,
    TEXT_FONT_FAMILY,
    UNITS_PER_INCH,
    XLINK_NAMESPACE,
)
from .glyphs import EventStyle, quote_attr, render_event, render_events
from .holidays import Holiday, holidays_for_sets
from .layout import CalendarLayout, Cell, compute_layout
from .locales import LocaleNames, locale_names
from .moon import generate_moon_illumination_svg, is_large_moon, should_show_moon
from .options import Configuration
from .profiles import DEFAULT_PAGE, PageProfile, resolve_page_profile
from .sprites import DocumentSprites, SpriteLookup, bundled_sprite_cache

logger = logging.getLogger(__name__)

GRID_LINE_WIDTH = 0.5
DEFAULT_FRAGMENT_SIZE = 100.0

_ROOT_TAG_RE = re.compile(r"<svg\b([^>]*)>", re.DOTALL)
_DOCUMENT_RE = re.compile(r"<svg\b([^>]*)>(.*)</svg>", re.DOTALL)
_PROLOG_RE = re.compile(r"<\?xml.*?\?>|<!DOCTYPE.*?>", re.DOTALL)
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)")


def _attribute(attributes: str, name: str) -> str | None:
    match = re.search(rf'\b{name}="([^"]*)"', attributes)
    return match.group(1) if match else None


def _length(raw_value: str | None) -> float | None:
    if not raw_value:
        return None
    match = _NUMBER_RE.match(raw_value.strip())
    return float(match.group(0)) if match else None


def svg_dimensions(svg: str) -> tuple[float, float]:
    """Return the user-space width and height of an SVG document.

    The root ``viewBox`` wins over ``width``/``height`` attributes.
    """
    match = _ROOT_TAG_RE.search(svg)
    if match is None:
        msg = "document has no <svg> root element."
        raise ValueError(msg)
    attributes = match.group(1)
    view_box = _attribute(attributes, "viewBox")
    if view_box:
        numbers = [float(part) for part in _NUMBER_RE.findall(view_box)]
        if len(numbers) == 4 and numbers[2] > 0 and numbers[3] > 0:
            return numbers[2], numbers[3]
    width = _length(_attribute(attributes, "width"))
    height = _length(_attribute(attributes, "height"))
    if not width or not height:
        msg = "document has neither a viewBox nor a width and height."
        raise ValueError(msg)
    return width, height


class _Palette:
    """Text colors after applying user overrides to the theme colors."""

    def __init__(self, config: Configuration) -> None:
        theme_colors = config.palette.colors
        overrides = config.colors
        self.background = theme_colors.background
        self.year = overrides.year_color or theme_colors.text
        self.month = overrides.month_color or theme_colors.month_header
        self.day_text = overrides.day_text_color or theme_colors.text
        self.day_name = overrides.day_name_color or theme_colors.weekday_header
        self.grid = overrides.grid_line_color or DEFAULT_GRID_LINE_COLOR
        self.holiday = overrides.holiday_color
        self.custom_date = overrides.custom_date_color


def _text(
    text: str,
    x: float,
    y: float,
    *,
    font_size: float,
    fill: str,
    anchor: str = "middle",
    bold: bool = False,
    transform: str = "",
) -> str:
    weight = ' font-weight="bold"' if bold else ""
    return (
        f'<text x="{x:.2f}" y="{y:.2f}" font-size="{font_size:.2f}" fill="{quote_attr(fill)}" '
        f'text-anchor="{anchor}"{weight}{transform}>{escape(text)}</text>'
    )


def _rect(cell: Cell, *, fill: str, stroke: str | None) -> str:
    stroke_attr = (
        f' stroke="{quote_attr(stroke)}" stroke-width="{GRID_LINE_WIDTH}"' if stroke else ""
    )
    return (
        f'<rect x="{cell.x:.2f}" y="{cell.y:.2f}" width="{cell.width:.2f}" '
        f'height="{cell.height:.2f}" fill="{quote_attr(fill)}"{stroke_attr}/>'
    )


def _header_markup(
    config: Configuration, layout: CalendarLayout, names: LocaleNames, palette: _Palette
) -> list[str]:
    metrics = layout.metrics
    title = layout.title_position
    parts = [
        _text(
            str(config.year),
            title.text_x,
            title.text_y,
            font_size=metrics.year_font_size,
            fill=palette.year,
            bold=True,
        )
    ]

    for label in layout.month_labels:
        position = label.position
        transform = ""
        if config.rotate_month_names and position.rotatable:
            transform = f' transform="rotate(-90 {position.text_x:.2f} {position.text_y:.2f})"'
        parts.append(
            _text(
                names.month_name(label.month),
                position.text_x,
                position.text_y,
                font_size=metrics.month_font_size,
                fill=palette.month,
                anchor=position.anchor,
                bold=True,
                transform=transform,
            )
        )

    if config.show_day_names:
        for header in layout.weekday_headers:
            parts.append(
                _text(
                    names.weekday_abbreviation(header.weekday),
                    header.position.text_x,
                    header.position.text_y,
                    font_size=metrics.day_name_font_size,
                    fill=palette.day_name,
                    anchor=header.position.anchor,
                )
            )

    if config.show_week_numbers:
        for week in layout.week_numbers:
            parts.append(
                _text(
                    str(week.number),
                    week.position.text_x,
                    week.position.text_y,
                    font_size=metrics.week_number_font_size,
                    fill=palette.day_name,
                    anchor=week.position.anchor,
                )
            )
    return parts


def _day_markup(
    config: Configuration,
    layout: CalendarLayout,
    day: date,
    cell: Cell,
    *,
    names: LocaleNames,
    palette: _Palette,
    holiday: Holiday | None,
    sprites: SpriteLookup,
) -> list[str]:
    metrics = layout.metrics
    custom_entries = config.custom_dates.get(day, ())
    moon_shown = should_show_moon(config, day)
    style = EventStyle(
        mode=config.event_display_mode,
        emoji_font=config.emoji_font,
        emoji_position=config.emoji_position,
        moon_shown=moon_shown,
    )
    parts: list[str] = []

    if moon_shown:
        offset_y = config.moon.offset_y - (3 if style.draws_text else 0)
        parts.append(
            generate_moon_illumination_svg(
                day,
                cell.x + config.moon.offset_x,
                cell.y + offset_y,
                config.moon.latitude,
                config.moon.longitude,
                config,
            )
        )

    if config.show_day_numbers:
        fill = palette.day_text
        if holiday is not None:
            fill = palette.holiday
        elif custom_entries:
            fill = palette.custom_date
        parts.append(
            _text(
                str(day.day),
                cell.x + 5,
                cell.y + 14,
                font_size=metrics.day_font_size,
                fill=fill,
                anchor="start",
                bold=holiday is not None,
            )
        )

    if config.show_day_names and layout.day_names_in_cells:
        name_y = cell.bottom - 5 if is_large_moon(config) else cell.y + 26
        parts.append(
            _text(
                names.weekday_abbreviation(day.weekday()),
                cell.x + 5,
                name_y,
                font_size=metrics.day_name_font_size,
                fill=palette.day_name,
                anchor="start",
            )
        )

    if holiday is not None:
        parts.extend(
            render_event(
                holiday.emoji,
                holiday.name,
                cell,
                style=style,
                color=palette.holiday,
                sprites=sprites,
            )
        )
    if custom_entries:
        parts.append(
            render_events(
                custom_entries,
                cell,
                style=style,
                color=palette.custom_date,
                title_font_size=metrics.title_font_size,
                sprites=sprites,
            )
        )
    return parts


def generate_calendar_svg(config: Configuration, *, sprites: SpriteLookup | None = None) -> str:
    """Render the full year described by ``config`` as one SVG document."""
    sprites = DocumentSprites(sprites if sprites is not None else bundled_sprite_cache())
    layout = compute_layout(
        config.year,
        style=config.layout_style,
        first_day_of_week=config.first_day_of_week,
        compact=config.compact_mode,
        show_week_numbers=config.show_week_numbers,
    )
    names = locale_names(config.locale)
    palette = _Palette(config)
    holidays = holidays_for_sets(config.year, config.holiday_sets)
    grid_stroke = palette.grid if config.show_grid else None

    parts = [
        f'<svg xmlns="{SVG_NAMESPACE}" xmlns:xlink="{XLINK_NAMESPACE}" '
        f'width="{layout.width:.0f}" height="{layout.height:.0f}" '
        f'viewBox="0 0 {layout.width:.2f} {layout.height:.2f}">',
        f"<title>Calendar {config.year}</title>",
        f'<rect x="0" y="0" width="{layout.width:.2f}" height="{layout.height:.2f}" '
        f'fill="{quote_attr(palette.background)}"/>',
        f'<g font-family="{TEXT_FONT_FAMILY}">',
    ]
    parts.extend(_header_markup(config, layout, names, palette))

    if grid_stroke:
        parts.extend(_rect(cell, fill="none", stroke=grid_stroke) for cell in layout.blank_cells)

    for day_cell in layout.days:
        day = day_cell.day
        fill = cell_color(
            config, day, day.month, day.day, is_weekend(day), weekend_index(day)
        )
        parts.append(_rect(day_cell.cell, fill=fill, stroke=grid_stroke))

    for day_cell in layout.days:
        parts.extend(
            _day_markup(
                config,
                layout,
                day_cell.day,
                day_cell.cell,
                names=names,
                palette=palette,
                holiday=holidays.get(day_cell.day),
                sprites=sprites,
            )
        )

    parts.append("</g></svg>")
    logger.debug(
        "assembled %s calendar for %d with %d holiday(s), %d custom date(s)",
        layout.style,
        config.year,
        len(holidays),
        len(config.custom_dates),
    )
    return "".join(parts)


def wrap_svg_for_preview(fragment: str) -> str:
    """Make an SVG fragment previewable on its own.

    A root that already declares a ``viewBox`` is returned unchanged. Otherwise
    a viewBox derived from the size is added together with a white background.
    Bare fragments without an ``<svg>`` root are wrapped in one.
    """
    if not fragment or not fragment.strip():
        return fragment

    match = _ROOT_TAG_RE.search(fragment)
    if match is None:
        size = DEFAULT_FRAGMENT_SIZE
        return (
            f'<svg xmlns="{SVG_NAMESPACE}" xmlns:xlink="{XLINK_NAMESPACE}" '
            f'width="{size:g}" height="{size:g}" viewBox="0 0 {size:g} {size:g}">'
            f'<rect width="100%" height="100%" fill="white"/>{fragment}</svg>'
        )

    attributes = match.group(1)
    if _attribute(attributes, "viewBox") is not None:
        return fragment

    width = _length(_attribute(attributes, "width")) or DEFAULT_FRAGMENT_SIZE
    height = _length(_attribute(attributes, "height")) or DEFAULT_FRAGMENT_SIZE
    if attributes.rstrip().endswith("/"):
        opening = f'<svg{attributes.rstrip()[:-1]} viewBox="0 0 {width:g} {height:g}">'
        inner = "</svg>"
    else:
        opening = f'<svg{attributes} viewBox="0 0 {width:g} {height:g}">'
        inner = ""
    background = f'<rect width="{width:g}" height="{height:g}" fill="white"/>'
    return fragment[: match.start()] + opening + background + inner + fragment[match.end() :]


def wrap_svg_with_margins(svg: str, page: str | PageProfile = DEFAULT_PAGE) -> str:
    """Place a calendar document on a print page, scaled to fit inside the margins.

    The page uses UNITS_PER_INCH user units per inch. Content is centered
    horizontally and aligned to the top margin.
    """
    profile = resolve_page_profile(page) if isinstance(page, str) else page
    content_width, content_height = svg_dimensions(svg)
    document = _DOCUMENT_RE.search(_PROLOG_RE.sub("", svg))
    if document is None:
        msg = "document has no <svg> root element."
        raise ValueError(msg)
    view_box = _attribute(document.group(1), "viewBox")
    if not view_box:
        view_box = f"0 0 {content_width:g} {content_height:g}"

    page_width = profile.width_inches * UNITS_PER_INCH
    page_height = profile.height_inches * UNITS_PER_INCH
    margin = profile.margin_inches * UNITS_PER_INCH
    printable_width = profile.printable_width_inches * UNITS_PER_INCH
    printable_height = profile.printable_height_inches * UNITS_PER_INCH

    scale = min(printable_width / content_width, printable_height / content_height)
    offset_x = margin + (printable_width - content_width * scale) / 2
    offset_y = margin

    return (
        f'<svg xmlns="{SVG_NAMESPACE}" xmlns:xlink="{XLINK_NAMESPACE}" '
        f'width="{profile.width_inches:g}in" height="{profile.height_inches:g}in" '
        f'viewBox="0 0 {page_width:g} {page_height:g}">'
        f'<rect x="0" y="0" width="{page_width:g}" height="{page_height:g}" fill="white"/>'
        f'<svg x="{offset_x:.2f}" y="{offset_y:.2f}" width="{content_width * scale:.2f}" '
        f'height="{content_height * scale:.2f}" viewBox="{view_box}">{document.group(2)}</svg>'
        "</svg>"
    )
