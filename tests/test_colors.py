"""Tests for cell colors and themes."""

from __future__ import annotations

import json
import tempfile
import unittest
from datetime import date
from pathlib import Path

from calrender.colors import (
    cell_color,
    hsl_to_hex,
    is_weekend,
    theme_weekend_color,
    weekend_index,
)
from calrender.config import TRANSPARENT
from calrender.options import ColorOverrides, Configuration
from calrender.themes import (
    LookupTable1D,
    LookupTable2D,
    available_themes,
    resolve_theme,
)


def _color_for(config: Configuration, day: date) -> str:
    return cell_color(config, day, day.month, day.day, is_weekend(day), weekend_index(day))


class HslToHexTests(unittest.TestCase):
    def test_sampled_hues_are_seven_character_hex(self) -> None:
        for hue in range(0, 360, 60):
            value = hsl_to_hex(hue, 100, 50)
            self.assertEqual(len(value), 7)
            self.assertRegex(value, r"^#[0-9a-f]{6}$")

    def test_hue_wraps_at_360(self) -> None:
        self.assertEqual(hsl_to_hex(360, 100, 50), hsl_to_hex(0, 100, 50))
        self.assertEqual(hsl_to_hex(0, 100, 50), "#ff0000")
        self.assertEqual(hsl_to_hex(120, 100, 50), "#00ff00")
        self.assertEqual(hsl_to_hex(240, 100, 50), "#0000ff")

    def test_extremes(self) -> None:
        self.assertEqual(hsl_to_hex(0, 0, 100), "#ffffff")
        self.assertEqual(hsl_to_hex(200, 100, 0), "#000000")


class WeekendTests(unittest.TestCase):
    def test_is_weekend(self) -> None:
        self.assertTrue(is_weekend(date(2025, 3, 1)))
        self.assertTrue(is_weekend(date(2025, 3, 2)))
        self.assertFalse(is_weekend(date(2025, 3, 3)))

    def test_weekend_index_advances_on_every_weekend_day(self) -> None:
        self.assertEqual(weekend_index(date(2025, 3, 1)), 0)
        self.assertEqual(weekend_index(date(2025, 3, 2)), 1)
        self.assertEqual(weekend_index(date(2025, 3, 8)), 2)
        self.assertEqual(weekend_index(date(2025, 3, 29)), 8)
        self.assertEqual(weekend_index(date(2025, 3, 30)), 9)

    def test_month_opening_on_sunday_starts_at_zero(self) -> None:
        self.assertEqual(weekend_index(date(2025, 6, 1)), 0)
        self.assertEqual(weekend_index(date(2025, 6, 7)), 1)
        self.assertEqual(weekend_index(date(2025, 6, 8)), 2)


class CellColorTests(unittest.TestCase):
    monday = date(2025, 1, 6)
    friday = date(2025, 1, 10)
    saturday = date(2025, 1, 11)

    def test_weekday_is_transparent_with_default_theme(self) -> None:
        config = Configuration(year=2025)
        self.assertEqual(_color_for(config, self.monday), TRANSPARENT)

    def test_weekend_uses_theme_weekend_color(self) -> None:
        config = Configuration(year=2025)
        self.assertEqual(_color_for(config, self.saturday), "#f0f0f0")

    def test_weekend_override_wins(self) -> None:
        config = Configuration(year=2025, colors=ColorOverrides(weekend_bg_color="#abcdef"))
        self.assertEqual(_color_for(config, self.saturday), "#abcdef")
        self.assertEqual(_color_for(config, self.monday), TRANSPARENT)

    def test_highlighting_disabled_is_transparent(self) -> None:
        config = Configuration(year=2025, highlight_weekends=False)
        self.assertEqual(_color_for(config, self.saturday), TRANSPARENT)

    def test_weekday_cells_never_get_weekend_color(self) -> None:
        for theme in available_themes():
            config = Configuration(year=2025, theme=theme)
            weekend = _color_for(config, self.saturday)
            if weekend == TRANSPARENT:
                continue
            for offset in range(5):
                weekday = date(2025, 1, 6 + offset)
                if theme.startswith("rainbowDays"):
                    continue
                self.assertEqual(_color_for(config, weekday), TRANSPARENT, msg=theme)

    def test_rainbow_days_1_varies_by_weekday(self) -> None:
        config = Configuration(year=2025, theme="rainbowDays1")
        self.assertNotEqual(_color_for(config, self.monday), _color_for(config, self.friday))

    def test_rainbow_days_2_varies_by_day_of_month(self) -> None:
        config = Configuration(year=2025, theme="rainbowDays2")
        first = _color_for(config, date(2025, 1, 1))
        second = _color_for(config, date(2025, 1, 15))
        self.assertNotEqual(first, second)

    def test_rainbow_days_3_varies_across_the_year(self) -> None:
        config = Configuration(year=2025, theme="rainbowDays3")
        first = _color_for(config, date(2025, 1, 1))
        second = _color_for(config, date(2025, 12, 30))
        self.assertNotEqual(first, second)

    def test_rainbow_days_3_lightness_varies_with_distance_from_year_end(self) -> None:
        config = Configuration(year=2025, theme="rainbowDays3")
        first = _color_for(config, date(2025, 1, 15))
        second = _color_for(config, date(2025, 12, 15))
        self.assertNotEqual(first, second)

    def test_rainbow_themes_ignore_weekend_gate(self) -> None:
        config = Configuration(year=2025, theme="rainbowDays", highlight_weekends=False)
        self.assertNotEqual(_color_for(config, self.monday), TRANSPARENT)
        self.assertRegex(_color_for(config, self.saturday), r"^#[0-9a-f]{6}$")

    def test_rainbow_weekends_colors_only_weekends(self) -> None:
        config = Configuration(year=2025, theme="rainbowWeekends")
        self.assertEqual(_color_for(config, self.monday), TRANSPARENT)
        self.assertRegex(_color_for(config, self.saturday), r"^#[0-9a-f]{6}$")

    def test_deterministic(self) -> None:
        for theme in available_themes():
            config = Configuration(year=2025, theme=theme)
            first = [_color_for(config, date(2025, 5, day)) for day in range(1, 32)]
            second = [_color_for(config, date(2025, 5, day)) for day in range(1, 32)]
            self.assertEqual(first, second)


class LookupThemeTests(unittest.TestCase):
    def test_two_dimensional_table_indexes_weekend_occurrence(self) -> None:
        theme = resolve_theme("vermontWeekends")
        self.assertIsInstance(theme, LookupTable2D)
        day = date(2025, 5, 10)
        self.assertEqual(theme_weekend_color(theme, day, 5, 2), "#A2D9CE")

    def test_out_of_range_index_falls_back_to_first_entry(self) -> None:
        theme = resolve_theme("vermontWeekends")
        day = date(2025, 5, 10)
        self.assertEqual(theme_weekend_color(theme, day, 5, 99), "#82E0AA")
        self.assertEqual(theme_weekend_color(theme, day, 5, -1), "#82E0AA")

    def test_one_dimensional_table_uses_month(self) -> None:
        theme = resolve_theme("lakeshoreWeekends")
        self.assertIsInstance(theme, LookupTable1D)
        self.assertEqual(theme_weekend_color(theme, date(2025, 3, 1), 3, 0), "#b3e5fc")

    def test_lookup_theme_in_cell_color(self) -> None:
        config = Configuration(year=2025, theme="sunsetWeekends")
        self.assertEqual(_color_for(config, date(2025, 1, 11)), "#fce4ec")

    def test_late_month_weekends_reach_the_end_of_the_table(self) -> None:
        config = Configuration(year=2025, theme="vermontWeekends")
        self.assertEqual(_color_for(config, date(2025, 3, 1)), "#E9F7EF")
        self.assertEqual(_color_for(config, date(2025, 3, 29)), "#d1a4fd")
        self.assertEqual(_color_for(config, date(2025, 10, 26)), "rgba(225,190,140,0.4)")


class ThemeResolutionTests(unittest.TestCase):
    def test_builtin_names(self) -> None:
        names = available_themes()
        for name in ("default", "rainbowDays", "rainbowDays1", "rainbowDays2", "rainbowDays3"):
            self.assertIn(name, names)

    def test_unknown_theme_falls_back_to_default(self) -> None:
        with self.assertLogs("calrender.themes", level="WARNING"):
            theme = resolve_theme("no-such-theme")
        self.assertEqual(theme.name, "default")

    def test_theme_file_overrides_colors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            theme_path = Path(tmp_dir) / "theme.json"
            theme_path.write_text(
                json.dumps({"weekend_background": "#123456", "month_header": "navy"}),
                encoding="utf-8",
            )
            theme = resolve_theme("default", theme_file=theme_path)
        self.assertEqual(theme.colors.weekend_background, "#123456")
        self.assertEqual(theme.colors.month_header, "navy")

    def test_theme_file_rejects_unknown_keys_and_bad_colors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            theme_path = Path(tmp_dir) / "theme.json"
            theme_path.write_text(json.dumps({"accent": "#123456"}), encoding="utf-8")
            with self.assertRaisesRegex(ValueError, "unknown theme key"):
                resolve_theme("default", theme_file=theme_path)

            theme_path.write_text(json.dumps({"text": "zzzzzz"}), encoding="utf-8")
            with self.assertRaisesRegex(ValueError, "invalid color value"):
                resolve_theme("default", theme_file=theme_path)

    def test_missing_theme_file(self) -> None:
        with self.assertRaisesRegex(ValueError, "does not exist"):
            resolve_theme("default", theme_file="/nonexistent/theme.json")


if __name__ == "__main__":
    unittest.main()
