"""SVG to PDF transcoding."""

from __future__ import annotations

import io
import logging
import re
from collections.abc import Sequence

import cairosvg
from reportlab.lib.utils import ImageReader

from .assembler import generate_calendar_svg, svg_dimensions
from .colors import hsl_to_hex
from .config import DEFAULT_RASTER_DPI, POINTS_PER_INCH
from .drawing import DrawingPrimitives, create_reportlab_primitives
from .errors import PdfConversionError
from .options import Configuration
from .profiles import DEFAULT_PAGE, PageProfile, resolve_page_profile
from .sprites import SpriteLookup

logger = logging.getLogger(__name__)

NO_PAINT = "none"
PDF_CREATOR = "calrender"

_NUMBER = r"(\d+(?:\.\d+)?|\.\d+)"
_SIGNED_NUMBER = r"(-?(?:\d+(?:\.\d+)?|\.\d+))"
_RGBA_RE = re.compile(
    rf"^rgba\(\s*{_NUMBER}\s*,\s*{_NUMBER}\s*,\s*{_NUMBER}\s*,\s*{_NUMBER}\s*\)$", re.IGNORECASE
)
_HSL_RE = re.compile(
    rf"^hsla?\(\s*{_SIGNED_NUMBER}(?:deg)?\s*,\s*{_NUMBER}%\s*,\s*{_NUMBER}%"
    rf"\s*(?:,\s*{_NUMBER}\s*)?\)$",
    re.IGNORECASE,
)
_PAINT_ATTRIBUTE_RE = re.compile(r'\b(fill|stroke|stop-color|flood-color)="([^"]*)"')
_ID_RE = re.compile(r'\bid="([^"]+)"')
_REFERENCE_RE = re.compile(r'url\(#([^)]+)\)|\bhref="#([^"]+)"')


def _channel(raw_value: str) -> int:
    return min(255, max(0, round(float(raw_value))))


def convert_color_for_pdf(color: str | None) -> str:
    """Normalize a CSS color to a form the PDF rasterizer paints without alpha.

    Hex and named colors are returned unchanged. ``rgba()`` drops its alpha,
    ``hsl()`` becomes hex, and fully transparent or empty values become ``none``.
    Malformed functional notation is returned unchanged like any other color.
    """
    if color is None:
        return NO_PAINT
    value = color.strip()
    if not value or value.lower() == "transparent":
        return NO_PAINT

    rgba = _RGBA_RE.match(value)
    if rgba is not None:
        red, green, blue, alpha = rgba.groups()
        if float(alpha) == 0:
            return NO_PAINT
        return f"rgb({_channel(red)}, {_channel(green)}, {_channel(blue)})"

    hsl = _HSL_RE.match(value)
    if hsl is not None:
        hue, saturation, lightness, alpha = hsl.groups()
        if alpha is not None and float(alpha) == 0:
            return NO_PAINT
        return hsl_to_hex(float(hue), float(saturation), float(lightness))

    return color


def normalize_svg_colors(svg: str) -> str:
    """Rewrite every paint attribute through convert_color_for_pdf."""

    def _replace(match: re.Match[str]) -> str:
        return f'{match.group(1)}="{convert_color_for_pdf(match.group(2))}"'

    return _PAINT_ATTRIBUTE_RE.sub(_replace, svg)


def unresolved_references(svg: str) -> list[str]:
    """Return fragment ids referenced by ``url(#..)`` or ``href="#.."`` but never defined."""
    defined = set(_ID_RE.findall(svg))
    missing: list[str] = []
    for match in _REFERENCE_RE.finditer(svg):
        target = match.group(1) or match.group(2)
        if target not in defined and target not in missing:
            missing.append(target)
    return missing


def _validate_references(svg: str) -> None:
    missing = unresolved_references(svg)
    if missing:
        msg = f"unresolved SVG reference(s): {', '.join('#' + item for item in missing)}."
        raise PdfConversionError(msg)


def _placement(
    profile: PageProfile, content_width: float, content_height: float
) -> tuple[float, float, float, float]:
    """Return (x, y, width, height) in points for content fitted inside the margins."""
    printable_width = profile.printable_width_inches * POINTS_PER_INCH
    printable_height = profile.printable_height_inches * POINTS_PER_INCH
    margin = profile.margin_inches * POINTS_PER_INCH
    scale = min(printable_width / content_width, printable_height / content_height)
    width = content_width * scale
    height = content_height * scale
    page_height = profile.pagesize[1]
    return margin + (printable_width - width) / 2, page_height - margin - height, width, height


def _draw_svg_page(
    pdf: DrawingPrimitives, svg: str, profile: PageProfile, *, dpi: int
) -> None:
    prepared = normalize_svg_colors(svg)
    _validate_references(prepared)
    content_width, content_height = svg_dimensions(prepared)
    x, y, width, height = _placement(profile, content_width, content_height)

    png = cairosvg.svg2png(
        bytestring=prepared.encode("utf-8"),
        output_width=max(1, round(width / POINTS_PER_INCH * dpi)),
        output_height=max(1, round(height / POINTS_PER_INCH * dpi)),
        background_color="white",
    )
    pdf.set_fill_color("white")
    pdf.rect(0, 0, *profile.pagesize, fill=1, stroke=0)
    pdf.draw_image(ImageReader(io.BytesIO(png)), x, y, width, height)
    pdf.show_page()


def render_svg_to_pdf(
    svg: str | Sequence[str],
    year: int,
    *,
    page: str | PageProfile = DEFAULT_PAGE,
    dpi: int = DEFAULT_RASTER_DPI,
) -> bytes:
    """Render one SVG document per PDF page and return the PDF bytes.

    Pages are sized by the page profile and the artwork is fitted inside its
    margins. Any failure surfaces as PdfConversionError.
    """
    profile = resolve_page_profile(page) if isinstance(page, str) else page
    pages = [svg] if isinstance(svg, str) else list(svg)
    if not pages:
        msg = "nothing to render: no SVG pages given."
        raise PdfConversionError(msg)
    if dpi <= 0:
        msg = "dpi must be > 0."
        raise ValueError(msg)

    buffer = io.BytesIO()
    pdf = create_reportlab_primitives(buffer, pagesize=profile.pagesize)
    pdf.set_title(f"Calendar {year}")
    pdf.set_creator(PDF_CREATOR)
    try:
        for page_svg in pages:
            _draw_svg_page(pdf, page_svg, profile, dpi=dpi)
        pdf.save()
    except PdfConversionError:
        raise
    except Exception as exc:  # noqa: BLE001
        msg = f"could not convert calendar {year} to PDF: {exc}"
        raise PdfConversionError(msg) from exc

    data = buffer.getvalue()
    logger.info(
        "rendered %d page(s) for %d on %s at %d dpi (%d bytes)",
        len(pages),
        year,
        profile.name,
        dpi,
        len(data),
    )
    return data


def generate_calendar_pdf(
    config: Configuration,
    *,
    page: str | PageProfile = DEFAULT_PAGE,
    dpi: int = DEFAULT_RASTER_DPI,
    sprites: SpriteLookup | None = None,
) -> bytes:
    """Assemble the calendar for ``config`` and transcode it to PDF bytes."""
    svg = generate_calendar_svg(config, sprites=sprites)
    return render_svg_to_pdf(svg, config.year, page=page, dpi=dpi)
