"""Tests for configuration defaults and JSON parsing."""

from __future__ import annotations

import calendar
import json
import tempfile
import unittest
from datetime import date
from pathlib import Path

from calrender.errors import ConfigurationError
from calrender.options import (
    ColorOverrides,
    Configuration,
    MoonSettings,
    load_configuration,
    parse_configuration,
)


class DefaultsTests(unittest.TestCase):
    def test_empty_object_yields_defaults(self) -> None:
        config = parse_configuration({})
        self.assertEqual(config.year, date.today().year)
        self.assertEqual(config.theme, "default")
        self.assertEqual(config.layout_style, "default")
        self.assertEqual(config.first_day_of_week, calendar.SUNDAY)
        self.assertTrue(config.show_day_names)
        self.assertTrue(config.show_day_numbers)
        self.assertTrue(config.show_grid)
        self.assertTrue(config.highlight_weekends)
        self.assertFalse(config.show_week_numbers)
        self.assertFalse(config.compact_mode)
        self.assertFalse(config.rotate_month_names)
        self.assertEqual(config.moon.display_mode, "none")
        self.assertEqual(config.moon.size, 20)
        self.assertEqual(config.moon.offset_x, 25)
        self.assertEqual(config.moon.offset_y, 36)
        self.assertEqual(config.moon.border_width, 1.5)
        self.assertEqual(config.moon.latitude, 0)
        self.assertEqual(config.moon.longitude, 0)
        self.assertEqual(config.colors.holiday_color, "#ff5252")
        self.assertIsNone(config.emoji_font)
        self.assertEqual(config.palette.name, "default")

    def test_none_payload_yields_defaults(self) -> None:
        self.assertEqual(parse_configuration(None), Configuration())

    def test_unknown_keys_are_ignored(self) -> None:
        config = parse_configuration({"shippingAddress": "somewhere", "theme": "rainbowDays1"})
        self.assertEqual(config.theme, "rainbowDays1")
        self.assertEqual(config.palette.name, "rainbowDays1")


class YearValidationTests(unittest.TestCase):
    def test_out_of_range_year_raises(self) -> None:
        for year in (999, 10000, -5):
            with self.assertRaises(ConfigurationError):
                Configuration(year=year)

    def test_configuration_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_configuration({"year": 50})

    def test_non_integer_year_raises(self) -> None:
        for raw_year in ("abc", 2024.5, True):
            with self.assertRaises(ConfigurationError):
                parse_configuration({"year": raw_year})

    def test_numeric_string_year_is_accepted(self) -> None:
        self.assertEqual(parse_configuration({"year": "2024"}).year, 2024)


class CoercionTests(unittest.TestCase):
    def test_values_are_coerced(self) -> None:
        config = parse_configuration(
            {
                "showGrid": "false",
                "compactMode": "yes",
                "moonSize": "12",
                "latitude": 45,
                "firstDayOfWeek": "monday",
            }
        )
        self.assertFalse(config.show_grid)
        self.assertTrue(config.compact_mode)
        self.assertEqual(config.moon.size, 12.0)
        self.assertEqual(config.moon.latitude, 45.0)
        self.assertEqual(config.first_day_of_week, calendar.MONDAY)

    def test_numeric_fields_are_clamped(self) -> None:
        config = parse_configuration(
            {"moonSize": 500, "moonBorderWidth": -3, "latitude": 120, "longitude": -400}
        )
        self.assertEqual(config.moon.size, 60)
        self.assertEqual(config.moon.border_width, 0)
        self.assertEqual(config.moon.latitude, 90)
        self.assertEqual(config.moon.longitude, -180)

    def test_bad_values_fall_back_to_defaults(self) -> None:
        with self.assertLogs("calrender.options", level="WARNING"):
            config = parse_configuration({"showGrid": "maybe", "moonSize": "big"})
        self.assertTrue(config.show_grid)
        self.assertEqual(config.moon.size, 20)

    def test_unknown_modes_fall_back(self) -> None:
        with self.assertLogs("calrender.options", level="WARNING"):
            config = parse_configuration(
                {"moonDisplayMode": "eclipse", "eventDisplayMode": "giant"}
            )
        self.assertEqual(config.moon.display_mode, "none")
        self.assertEqual(config.event_display_mode, "large")

    def test_unknown_time_zone_falls_back_to_utc(self) -> None:
        with self.assertLogs("calrender.options", level="WARNING"):
            config = Configuration(year=2025, time_zone="Mars/Olympus_Mons")
        self.assertEqual(config.time_zone, "UTC")

    def test_color_overrides(self) -> None:
        config = parse_configuration({"weekendBgColor": "#eeeeee", "yearColor": ""})
        self.assertEqual(config.colors.weekend_bg_color, "#eeeeee")
        self.assertIsNone(config.colors.year_color)

    def test_unparseable_colors_fall_back_with_a_warning(self) -> None:
        with self.assertLogs("calrender.options", level="WARNING") as logs:
            config = parse_configuration(
                {
                    "monthColor": "no-such-color",
                    "holidayColor": '#ff0000" onload="x',
                    "moonDarkColor": "<dark>",
                    "dayTextColor": "steelblue",
                    "gridLineColor": "rgb(10, 20, 30)",
                }
            )
        self.assertEqual(len(logs.records), 3)
        self.assertIsNone(config.colors.month_color)
        self.assertEqual(config.colors.holiday_color, ColorOverrides().holiday_color)
        self.assertEqual(config.moon.dark_color, MoonSettings().dark_color)
        self.assertEqual(config.colors.day_text_color, "steelblue")
        self.assertEqual(config.colors.grid_line_color, "rgb(10, 20, 30)")

    def test_holiday_sets(self) -> None:
        config = parse_configuration({"holidaySets": ["us", "jewish"]})
        self.assertEqual(config.holiday_sets, ("us", "jewish"))
        self.assertEqual(parse_configuration({"holidaySets": "us"}).holiday_sets, ("us",))


class CustomDateTests(unittest.TestCase):
    def test_custom_dates_accept_entries_lists_and_bare_emoji(self) -> None:
        config = parse_configuration(
            {
                "customDates": {
                    "2025-12-25": [
                        {
                            "emoji": "🎄",
                            "title": "Tree day",
                            "displaySettings": {"emojiX": 150, "textWrap": "true"},
                        },
                        "⭐",
                    ],
                    "2025-07-04": {"emoji": "🎆"},
                    "not-a-date": "🎉",
                }
            }
        )
        entries = config.custom_dates[date(2025, 12, 25)]
        self.assertEqual(len(entries), 2)
        self.assertEqual(entries[0].title, "Tree day")
        self.assertEqual(entries[0].display.emoji_x, 100)
        self.assertTrue(entries[0].display.text_wrap)
        self.assertEqual(entries[1].emoji, "⭐")
        self.assertIsNone(entries[1].display)
        self.assertEqual(len(config.custom_dates[date(2025, 7, 4)]), 1)
        self.assertEqual(len(config.custom_dates), 2)

    def test_duplicate_entries_are_kept(self) -> None:
        config = parse_configuration({"customDates": {"2025-01-01": ["🎉", "🎉"]}})
        self.assertEqual(len(config.custom_dates[date(2025, 1, 1)]), 2)

    def test_custom_dates_are_read_only(self) -> None:
        config = parse_configuration({"customDates": {"2025-01-01": "🎉"}})
        with self.assertRaises(TypeError):
            config.custom_dates[date(2025, 1, 2)] = ()


class MoonSettingsTests(unittest.TestCase):
    def test_settings_clamp_on_construction(self) -> None:
        settings = MoonSettings(size=1, border_width=50)
        self.assertEqual(settings.size, 4)
        self.assertEqual(settings.border_width, 10)


class LoadConfigurationTests(unittest.TestCase):
    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "calendar.json"
            path.write_text(json.dumps({"year": 2024, "locale": "fr"}), encoding="utf-8")
            config = load_configuration(path)
        self.assertEqual(config.year, 2024)
        self.assertEqual(config.locale, "fr")

    def test_missing_file_raises(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "does not exist"):
            load_configuration("/nonexistent/calendar.json")

    def test_invalid_json_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "calendar.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaisesRegex(ConfigurationError, "not valid JSON"):
                load_configuration(path)

    def test_non_object_payload_raises(self) -> None:
        with self.assertRaises(ConfigurationError):
            parse_configuration(["year", 2024])


if __name__ == "__main__":
    unittest.main()
