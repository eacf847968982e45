"""Emoji and title markup for day cells.

Emoji resolve to a vector sprite when the sprite table has one and to a
``<text>`` element otherwise. Titles are truncated or word-wrapped to fit a
cell and may be rotated around their anchor.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from types import MappingProxyType
from xml.sax.saxutils import escape

from .config import (
    DEFAULT_EMOJI_ANCHOR,
    ELLIPSIS,
    EMOJI_ANCHORS,
    EMOJI_FAMILY_COLOR,
    EMOJI_FAMILY_MONO,
    EMOJI_FAR_INSET,
    EMOJI_FONT_MONO,
    EMOJI_FONT_MONO_PREFIX,
    EMOJI_NEAR_INSET,
    EMOJI_TOP_BASELINE,
    EMOJI_VERTICAL_NUDGE,
    MONO_DEFAULT_COLOR,
    MONO_VARIANT_COLORS,
    TEXT_FONT_FAMILY,
    TITLE_MAX_CHARS,
    TITLE_TRUNCATE_KEEP,
    WRAP_MAX_LINES,
    WRAP_MIN_CHARS,
)
from .layout import Cell
from .options import CustomDateEntry, DisplaySettings
from .profiles import NORMAL_METRICS
from .sprites import Sprite, SpriteLookup, TextFallback, normalize_glyph

LARGE_EMOJI_MODES = ("large", "large-text")
SMALL_EMOJI_MODES = ("small", "small-text")
TEXT_MODES = ("large-text", "small-text", "text")

DEFAULT_CUSTOM_EMOJI_SIZE = 12.0
DEFAULT_CUSTOM_TEXT_SIZE = 7.0
CUSTOM_EMOJI_SIZE_RANGE = (8.0, 24.0)
CUSTOM_TEXT_SIZE_RANGE = (5.0, 12.0)
DEFAULT_CUSTOM_TEXT_X = 50.0
DEFAULT_CUSTOM_TEXT_Y = 70.0
WRAP_LINE_SPACING = 1.15

TEXT_ALIGN_ANCHORS = MappingProxyType({"left": "start", "right": "end"})

MONOCHROME_SUBSTITUTIONS = MappingProxyType(
    {
        "🕎": "✡️",
        "🎖️": "⭐",
        "🪁": "☀️",
        "🪈": "🎵",
        "🪔": "🕯️",
        "🤲": "🙏",
        "☪️": "🌙",
        "🧧": "🏮",
        "🪦": "🌸",
        "🥮": "🌕",
        "🏔️": "⛰️",
        "🦫": "🐿️",
        "🏳️‍🌈": "🌈",
    }
)
_SUBSTITUTIONS_BY_KEY = MappingProxyType(
    {normalize_glyph(glyph): swap for glyph, swap in MONOCHROME_SUBSTITUTIONS.items()}
)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(max(value, low), high)


def quote_attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


# Emoji fonts


def is_monochrome_font(emoji_font: str | None) -> bool:
    if not emoji_font:
        return False
    return emoji_font == EMOJI_FONT_MONO or emoji_font.startswith(EMOJI_FONT_MONO_PREFIX)


def substitute_for_monochrome(glyph: str, emoji_font: str | None) -> str:
    """Swap multi-tone emoji for simpler ones when a monochrome font is active."""
    if not is_monochrome_font(emoji_font):
        return glyph
    return _SUBSTITUTIONS_BY_KEY.get(normalize_glyph(glyph), glyph)


def emoji_font_family(emoji_font: str | None) -> str:
    return EMOJI_FAMILY_MONO if is_monochrome_font(emoji_font) else EMOJI_FAMILY_COLOR


def mono_fill_color(emoji_font: str | None) -> str | None:
    """Return the text fill for a monochrome font, or None for color emoji."""
    if not is_monochrome_font(emoji_font):
        return None
    if emoji_font.startswith(EMOJI_FONT_MONO_PREFIX):
        variant = emoji_font[len(EMOJI_FONT_MONO_PREFIX) :]
        return MONO_VARIANT_COLORS.get(variant, MONO_DEFAULT_COLOR)
    return MONO_DEFAULT_COLOR


# Positions


def calculate_emoji_position(anchor: str | None, cell: Cell) -> Point:
    """Map a ``<row>-<column>`` anchor name to an emoji baseline point in ``cell``.

    Unknown or empty anchors behave like ``bottom-left``.
    """
    if anchor not in EMOJI_ANCHORS:
        anchor = DEFAULT_EMOJI_ANCHOR
    row, column = anchor.split("-")

    if column == "center":
        x = cell.x + cell.width / 2 - EMOJI_NEAR_INSET
    elif column == "right":
        x = cell.x + cell.width - EMOJI_FAR_INSET
    else:
        x = cell.x + EMOJI_NEAR_INSET

    if row == "top":
        y = cell.y + EMOJI_TOP_BASELINE
    elif row == "middle":
        y = cell.y + cell.height / 2 + EMOJI_VERTICAL_NUDGE
    else:
        y = cell.y + cell.height - EMOJI_VERTICAL_NUDGE
    return Point(x, y)


def _percent_point(cell: Cell, x_percent: float, y_percent: float) -> Point:
    return Point(cell.x + cell.width * x_percent / 100, cell.y + cell.height * y_percent / 100)


# Emoji


def render_emoji(
    glyph: str,
    x: float,
    y: float,
    size: float,
    *,
    emoji_font: str | None = None,
    centered: bool = False,
    sprites: SpriteLookup | None = None,
) -> str:
    """Return markup drawing ``glyph`` at (x, y).

    Centered glyphs are centered on the point; others sit on it as a baseline,
    left aligned.
    """
    glyph = substitute_for_monochrome(glyph, emoji_font)
    result = sprites.lookup(glyph) if sprites is not None else TextFallback(glyph)

    if sprites is not None and isinstance(result, Sprite):
        if centered:
            left, top = x - size / 2, y - size / 2
        else:
            left, top = x, y - size
        return sprites.sprite_markup(
            glyph, left, top, size, monochrome=is_monochrome_font(emoji_font)
        )

    if isinstance(result, TextFallback):
        fill = mono_fill_color(emoji_font)
        fill_attr = f' fill="{fill}"' if fill else ""
        style_attr = (
            ' style="text-anchor: middle; dominant-baseline: middle"' if centered else ""
        )
        return (
            f'<text x="{x:.2f}" y="{y:.2f}" font-size="{size:.2f}" '
            f'font-family="{quote_attr(emoji_font_family(emoji_font))}"{fill_attr}{style_attr}>'
            f"{escape(result.glyph)}</text>"
        )

    msg = f"unexpected sprite lookup result {result!r}."
    raise TypeError(msg)


# Titles


def truncate_title(
    text: str, *, max_chars: int = TITLE_MAX_CHARS, keep: int = TITLE_TRUNCATE_KEEP
) -> str:
    if len(text) <= max_chars:
        return text
    return text[:keep] + ELLIPSIS


def wrap_title(
    text: str, *, width: int = WRAP_MIN_CHARS, max_lines: int = WRAP_MAX_LINES
) -> list[str]:
    """Split ``text`` at word boundaries into lines of about ``width`` characters.

    Text without an internal space, or no longer than ``width``, stays on one line.
    """
    text = text.strip()
    if " " not in text or len(text) <= width:
        return [text]

    lines: list[str] = []
    current = ""
    for word in text.split():
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    lines.append(current)

    if len(lines) > max_lines:
        lines = lines[:max_lines]
        lines[-1] = lines[-1] + ELLIPSIS
    return lines


def _rotation_attr(rotation: float, x: float, y: float) -> str:
    if not rotation:
        return ""
    return f' transform="rotate({rotation:g} {x:.2f} {y:.2f})"'


def _text_element(
    text: str,
    x: float,
    y: float,
    *,
    font_size: float,
    fill: str,
    anchor: str,
    bold: bool,
    extra: str = "",
) -> str:
    weight = ' font-weight="bold"' if bold else ""
    return (
        f'<text x="{x:.2f}" y="{y:.2f}" font-size="{font_size:.2f}" fill="{quote_attr(fill)}" '
        f'text-anchor="{anchor}"{weight}{extra}>{escape(text)}</text>'
    )


def render_title(
    text: str,
    x: float,
    y: float,
    *,
    font_size: float,
    fill: str,
    anchor: str = "middle",
    bold: bool = False,
    wrap: bool = False,
    rotation: float = 0.0,
) -> str:
    """Render a title as one truncated line, or as wrapped lines when ``wrap`` is set."""
    transform = _rotation_attr(rotation, x, y)
    lines = wrap_title(text) if wrap else [truncate_title(text)]
    if len(lines) == 1:
        return _text_element(
            lines[0],
            x,
            y,
            font_size=font_size,
            fill=fill,
            anchor=anchor,
            bold=bold,
            extra=transform,
        )

    line_height = font_size * WRAP_LINE_SPACING
    first_y = y - (len(lines) - 1) * line_height / 2
    elements = "".join(
        _text_element(
            line,
            x,
            first_y + index * line_height,
            font_size=font_size,
            fill=fill,
            anchor=anchor,
            bold=bold,
        )
        for index, line in enumerate(lines)
    )
    return f"<g{transform}>{elements}</g>"


# Events


@dataclass(frozen=True)
class EventStyle:
    """Rendering options shared by holiday and custom-date events in one document."""

    mode: str = "large"
    emoji_font: str | None = None
    emoji_position: str = DEFAULT_EMOJI_ANCHOR
    moon_shown: bool = False

    @property
    def draws_emoji(self) -> bool:
        return self.mode in LARGE_EMOJI_MODES or self.mode in SMALL_EMOJI_MODES

    @property
    def draws_text(self) -> bool:
        return self.mode in TEXT_MODES


def render_event(
    glyph: str,
    name: str | None,
    cell: Cell,
    *,
    style: EventStyle,
    color: str,
    sprites: SpriteLookup | None = None,
) -> list[str]:
    """Return markup for one event (emoji plus optional name) per the display mode."""
    parts: list[str] = []
    if glyph and style.mode in LARGE_EMOJI_MODES:
        size = max(16.0, cell.height / 3)
        center_y = cell.center_y
        if style.moon_shown:
            center_y = (cell.center_y + cell.bottom) / 2
        parts.append(
            render_emoji(
                glyph,
                cell.center_x,
                center_y,
                size,
                emoji_font=style.emoji_font,
                centered=True,
                sprites=sprites,
            )
        )
    elif glyph and style.mode in SMALL_EMOJI_MODES:
        point = calculate_emoji_position(style.emoji_position, cell)
        parts.append(
            render_emoji(
                glyph,
                point.x,
                point.y,
                max(10.0, cell.height / 6),
                emoji_font=style.emoji_font,
                sprites=sprites,
            )
        )

    if name and style.draws_text:
        parts.append(
            render_title(
                name,
                cell.center_x,
                cell.bottom - 3,
                font_size=max(5.0, cell.width / 10),
                fill=color,
            )
        )
    return parts


def _cell_scale(cell: Cell) -> float:
    return cell.width / NORMAL_METRICS.cell_width


def _render_placed_entry(
    entry: CustomDateEntry,
    display: DisplaySettings,
    cell: Cell,
    *,
    style: EventStyle,
    color: str,
    sprites: SpriteLookup | None,
) -> list[str]:
    parts: list[str] = []
    scale = _cell_scale(cell)
    if entry.emoji and style.mode != "none":
        size = _clamp(
            (display.emoji_size or DEFAULT_CUSTOM_EMOJI_SIZE) * scale, CUSTOM_EMOJI_SIZE_RANGE
        )
        point = _percent_point(
            cell,
            display.emoji_x if display.emoji_x is not None else 50.0,
            display.emoji_y if display.emoji_y is not None else 50.0,
        )
        parts.append(
            render_emoji(
                entry.emoji,
                point.x,
                point.y,
                size,
                emoji_font=style.emoji_font,
                centered=True,
                sprites=sprites,
            )
        )

    if entry.title and style.mode != "none":
        point = _percent_point(
            cell,
            display.text_x if display.text_x is not None else DEFAULT_CUSTOM_TEXT_X,
            display.text_y if display.text_y is not None else DEFAULT_CUSTOM_TEXT_Y,
        )
        parts.append(
            render_title(
                entry.title,
                point.x,
                point.y,
                font_size=_clamp(
                    (display.text_size or DEFAULT_CUSTOM_TEXT_SIZE) * scale,
                    CUSTOM_TEXT_SIZE_RANGE,
                ),
                fill=display.text_color or color,
                anchor=TEXT_ALIGN_ANCHORS.get(display.text_align or "", "middle"),
                bold=display.text_bold,
                wrap=display.text_wrap,
                rotation=display.text_rotation,
            )
        )
    return parts


def render_custom_entry(
    entry: CustomDateEntry,
    cell: Cell,
    *,
    style: EventStyle,
    color: str,
    title_font_size: float = NORMAL_METRICS.title_font_size,
    sprites: SpriteLookup | None = None,
) -> list[str]:
    """Return markup for one custom-date entry.

    Entries with display settings are placed by percentage of the cell; others
    follow the event display mode with the title near the top of the cell.
    """
    if entry.display is not None:
        return _render_placed_entry(
            entry, entry.display, cell, style=style, color=color, sprites=sprites
        )

    parts: list[str] = []
    if style.draws_emoji:
        parts.extend(
            render_event(entry.emoji, None, cell, style=style, color=color, sprites=sprites)
        )
    if entry.title and style.mode != "none":
        parts.append(
            render_title(
                entry.title,
                cell.x + 5,
                cell.y + 38,
                font_size=title_font_size,
                fill=color,
                anchor="start",
            )
        )
    return parts


def render_events(
    events: Sequence[CustomDateEntry],
    cell: Cell,
    *,
    style: EventStyle,
    color: str,
    title_font_size: float = NORMAL_METRICS.title_font_size,
    sprites: SpriteLookup | None = None,
) -> str:
    """Render every custom-date entry of one day, in order."""
    return "".join(
        markup
        for entry in events
        for markup in render_custom_entry(
            entry,
            cell,
            style=style,
            color=color,
            title_font_size=title_font_size,
            sprites=sprites,
        )
    )
