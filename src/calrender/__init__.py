"""Full-year calendar rendering to SVG and PDF."""

from .assembler import generate_calendar_svg, wrap_svg_for_preview, wrap_svg_with_margins
from .errors import ConfigurationError, PdfConversionError
from .moon import generate_moon_illumination_svg
from .options import Configuration, load_configuration, parse_configuration
from .pdf import convert_color_for_pdf, generate_calendar_pdf, render_svg_to_pdf

__all__ = [
    "Configuration",
    "ConfigurationError",
    "PdfConversionError",
    "convert_color_for_pdf",
    "generate_calendar_pdf",
    "generate_calendar_svg",
    "generate_moon_illumination_svg",
    "load_configuration",
    "parse_configuration",
    "render_svg_to_pdf",
    "wrap_svg_for_preview",
    "wrap_svg_with_margins",
]
