"""CLI for calendar rendering and astronomy tables."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

from .assembler import generate_calendar_svg, wrap_svg_with_margins
from .astronomy import moon_phases_for_year, seasonal_events, sunrise_sunset
from .config import DEFAULT_FILENAME_TEMPLATE, DEFAULT_RASTER_DPI
from .errors import PdfConversionError
from .hebrew import hebrew_dates_for_year
from .layout import LAYOUTS
from .options import Configuration, load_configuration, parse_configuration
from .pdf import render_svg_to_pdf
from .profiles import DEFAULT_PAGE, PAGE_PROFILES
from .sprites import load_sprite_cache
from .themes import available_themes, resolve_theme

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_configuration(args: argparse.Namespace) -> Configuration:
    """Load the configuration file, if any, and apply command-line overrides."""
    config = load_configuration(args.config) if args.config else parse_configuration({})

    overrides: dict[str, object] = {}
    if args.year is not None:
        overrides["year"] = args.year
    if args.theme is not None:
        overrides["theme"] = args.theme
    if args.layout is not None:
        overrides["layout_style"] = args.layout
    if args.locale is not None:
        overrides["locale"] = args.locale
    if overrides:
        config = replace(config, **overrides)

    if args.theme_file is not None:
        config = replace(config, palette=resolve_theme(config.theme, theme_file=args.theme_file))
    return config


def generate_calendar(args: argparse.Namespace) -> Path:
    """Render the calendar described by parsed CLI arguments and return the output path."""
    config = build_configuration(args)
    sprites = load_sprite_cache(args.sprite_dir)

    destination = Path(
        args.output or DEFAULT_FILENAME_TEMPLATE.format(year=config.year, ext=args.format)
    )
    destination.parent.mkdir(parents=True, exist_ok=True)

    svg = generate_calendar_svg(config, sprites=sprites)
    if args.format == "svg":
        if args.margins:
            svg = wrap_svg_with_margins(svg, args.page)
        destination.write_text(svg, encoding="utf-8")
    else:
        destination.write_bytes(render_svg_to_pdf(svg, config.year, page=args.page, dpi=args.dpi))
    return destination


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render full-year calendars to SVG or PDF.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON configuration file. Absent keys take their defaults.",
    )
    parser.add_argument("--year", type=int, default=None, help="Year to render.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"Theme name ({', '.join(available_themes())}).",
    )
    parser.add_argument(
        "--layout",
        default=None,
        help=f"Layout style ({', '.join(LAYOUTS.style_ids())}).",
    )
    parser.add_argument("--locale", default=None, help="Locale tag for month and day names.")
    parser.add_argument(
        "--format",
        choices=("svg", "pdf"),
        default="pdf",
        help="Output format.",
    )
    parser.add_argument(
        "--page",
        choices=sorted(PAGE_PROFILES),
        default=DEFAULT_PAGE,
        help="Print page profile.",
    )
    parser.add_argument(
        "--dpi",
        type=int,
        default=DEFAULT_RASTER_DPI,
        help="Raster resolution for PDF output.",
    )
    parser.add_argument(
        "--margins",
        action="store_true",
        help="For SVG output, place the calendar on the print page inside its margins.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output path. Default: calendar_<year>.<format>",
    )
    parser.add_argument(
        "--theme-file",
        type=Path,
        default=None,
        help="JSON file with theme color overrides.",
    )
    parser.add_argument(
        "--sprite-dir",
        type=Path,
        default=None,
        help="Directory of emoji_u<codepoints>.svg sprites added to the bundled set.",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING")
    return parser


def _build_astro_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print astronomy and calendar tables.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    phases_parser = subparsers.add_parser("phases", help="List moon phase days of a year.")
    phases_parser.add_argument("--year", type=int, default=date.today().year)

    seasons_parser = subparsers.add_parser("seasons", help="List equinoxes and solstices.")
    seasons_parser.add_argument("--year", type=int, default=date.today().year)
    seasons_parser.add_argument("--time-zone", default="UTC")

    sun_parser = subparsers.add_parser("sun", help="Show sunrise and sunset for one day.")
    sun_parser.add_argument("--date", type=date.fromisoformat, default=date.today())
    sun_parser.add_argument("--lat", type=float, required=True)
    sun_parser.add_argument("--lon", type=float, required=True)
    sun_parser.add_argument("--time-zone", default="UTC")

    hebrew_parser = subparsers.add_parser("hebrew", help="Map each day of a year to a Hebrew date.")
    hebrew_parser.add_argument("--year", type=int, default=date.today().year)
    return parser


def _run_astro_cli(argv: list[str]) -> int:
    parser = _build_astro_arg_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "phases":
            for phase in moon_phases_for_year(args.year):
                print(f"{phase.day.isoformat()}\t{phase.phase.value}\t{phase.phase_value:.4f}")
            return 0

        if args.command == "seasons":
            for event in seasonal_events(args.year, zone=args.time_zone):
                print(f"{event.day.isoformat()}\t{event.type.value}")
            return 0

        if args.command == "sun":
            times = sunrise_sunset(args.date, args.lat, args.lon, zone=args.time_zone)
            print(f"sunrise: {times.sunrise or '-'}")
            print(f"sunset: {times.sunset or '-'}")
            return 0

        if args.command == "hebrew":
            for mapping in hebrew_dates_for_year(args.year):
                print(f"{mapping.gregorian_date.isoformat()}\t{mapping.hebrew_date}")
            return 0
    except (ValueError, KeyError) as exc:
        parser.exit(status=2, message=f"error: {exc}\n")

    parser.exit(status=2, message=f"error: unknown astro command '{args.command}'\n")
    return 2


def main(argv: list[str] | None = None) -> int:
    argv_list = list(sys.argv[1:] if argv is None else argv)
    if argv_list and argv_list[0] == "astro":
        return _run_astro_cli(argv_list[1:])

    parser = _build_arg_parser()
    args = parser.parse_args(argv_list)
    _configure_logging(args.log_level)

    try:
        destination = generate_calendar(args)
    except (ValueError, PdfConversionError) as exc:
        parser.exit(status=2, message=f"error: {exc}\n")

    print(f"Generated calendar at: {destination}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
