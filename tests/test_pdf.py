from __future__ import annotations

import re
import unittest
from unittest import mock

from calrender.drawing import DrawingPrimitives, create_reportlab_primitives
from calrender.errors import PdfConversionError
from calrender.options import Configuration, parse_configuration
from calrender.pdf import (
    convert_color_for_pdf,
    generate_calendar_pdf,
    normalize_svg_colors,
    render_svg_to_pdf,
    unresolved_references,
)
from calrender.sprites import SpriteCache

SMALL_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100" viewBox="0 0 200 100">'
    '<rect width="200" height="100" fill="rgba(0, 128, 255, 0.5)"/>'
    '<circle cx="50" cy="50" r="20" fill="hsl(120, 100%, 25%)" stroke="transparent"/></svg>'
)


class ColorConversionTests(unittest.TestCase):
    def test_empty_and_transparent_become_none(self) -> None:
        for value in (
            None,
            "",
            "  ",
            "transparent",
            "rgba(255, 255, 255, 0)",
            "hsla(0, 0%, 0%, 0)",
        ):
            self.assertEqual(convert_color_for_pdf(value), "none", msg=value)

    def test_rgba_drops_alpha(self) -> None:
        self.assertEqual(convert_color_for_pdf("rgba(10, 20, 30, 0.5)"), "rgb(10, 20, 30)")
        self.assertEqual(convert_color_for_pdf("RGBA(300,0,0,1)"), "rgb(255, 0, 0)")

    def test_hsl_becomes_hex(self) -> None:
        self.assertEqual(convert_color_for_pdf("hsl(0, 100%, 50%)"), "#ff0000")
        self.assertEqual(convert_color_for_pdf("hsla(240, 100%, 50%, 0.4)"), "#0000ff")

    def test_other_colors_pass_through(self) -> None:
        for value in ("#123456", "red", "rgb(1, 2, 3)", "none"):
            self.assertEqual(convert_color_for_pdf(value), value)

    def test_malformed_functional_colors_pass_through(self) -> None:
        for value in ("rgba(1.2.3, 0, 0, 1)", "rgba(., 0, 0, 1)", "hsl(1..2, 50%, 50%)"):
            self.assertEqual(convert_color_for_pdf(value), value)

    def test_svg_paint_attributes_are_rewritten(self) -> None:
        normalized = normalize_svg_colors(SMALL_SVG)
        self.assertIn('fill="rgb(0, 128, 255)"', normalized)
        self.assertIn('fill="#008000"', normalized)
        self.assertIn('stroke="none"', normalized)
        self.assertNotIn("rgba(", normalized)


class ReferenceTests(unittest.TestCase):
    def test_unresolved_references_are_listed_once(self) -> None:
        svg = (
            '<svg><defs><linearGradient id="ok"/></defs>'
            '<rect fill="url(#ok)"/><rect fill="url(#gone)"/>'
            '<use xlink:href="#gone"/><use href="#lost"/></svg>'
        )
        self.assertEqual(unresolved_references(svg), ["gone", "lost"])

    def test_unresolved_reference_fails_conversion(self) -> None:
        svg = '<svg width="10" height="10"><rect width="5" height="5" fill="url(#gone)"/></svg>'
        with self.assertRaisesRegex(PdfConversionError, "#gone"):
            render_svg_to_pdf(svg, 2025, page="letter", dpi=20)


class RenderTests(unittest.TestCase):
    def test_single_page(self) -> None:
        data = render_svg_to_pdf(SMALL_SVG, 2025, page="letter", dpi=20)
        self.assertTrue(data.startswith(b"%PDF"))
        self.assertIn(b"Calendar 2025", data)

    def test_every_drawing_primitive_is_used(self) -> None:
        recorders: list[mock.MagicMock] = []

        def _recording(*args, **kwargs):
            recorder = mock.MagicMock(wraps=create_reportlab_primitives(*args, **kwargs))
            recorders.append(recorder)
            return recorder

        with mock.patch("calrender.pdf.create_reportlab_primitives", side_effect=_recording):
            data = render_svg_to_pdf(SMALL_SVG, 2025, page="letter", dpi=20)

        self.assertTrue(data.startswith(b"%PDF"))
        (recorder,) = recorders
        declared = {name for name in vars(DrawingPrimitives) if not name.startswith("_")}
        called = {name for name, _args, _kwargs in recorder.method_calls}
        self.assertEqual(called, declared)

    def test_multiple_pages(self) -> None:
        data = render_svg_to_pdf([SMALL_SVG, SMALL_SVG], 2025, page="letter", dpi=20)
        self.assertEqual(len(re.findall(rb"/Type\s*/Page(?!s)", data)), 2)

    def test_empty_page_list_raises(self) -> None:
        with self.assertRaises(PdfConversionError):
            render_svg_to_pdf([], 2025)

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            render_svg_to_pdf(SMALL_SVG, 2025, dpi=0)
        with self.assertRaises(ValueError):
            render_svg_to_pdf(SMALL_SVG, 2025, page="a0")

    def test_malformed_svg_raises_conversion_error(self) -> None:
        with self.assertRaises(PdfConversionError):
            render_svg_to_pdf('<svg width="10" height="10"><rect></svg>', 2025, dpi=20)
        with self.assertRaises(PdfConversionError):
            render_svg_to_pdf("<svg></svg>", 2025, dpi=20)

    def test_calendar_documents_convert(self) -> None:
        configs = (
            Configuration(year=2024),
            parse_configuration(
                {
                    "year": 2025,
                    "layoutStyle": "weekday-grid",
                    "theme": "rainbowDays2",
                    "holidaySets": ["us", "christian"],
                    "moonDisplayMode": "illumination",
                    "latitude": 40.7,
                    "longitude": -74.0,
                    "eventDisplayMode": "small-text",
                }
            ),
            parse_configuration({"year": 2026, "layoutStyle": "grid", "compactMode": True}),
        )
        for config in configs:
            with self.subTest(year=config.year):
                data = generate_calendar_pdf(config, page="letter", dpi=20)
                self.assertTrue(data.startswith(b"%PDF"))

    def test_sprite_free_calendar_converts(self) -> None:
        config = parse_configuration({"year": 2025, "holidaySets": ["jewish"]})
        data = generate_calendar_pdf(config, page="letter", dpi=20, sprites=SpriteCache())
        self.assertTrue(data.startswith(b"%PDF"))


if __name__ == "__main__":
    unittest.main()
