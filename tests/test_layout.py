from __future__ import annotations

import calendar
import unittest
from datetime import date, timedelta

from calrender.layout import (
    LAYOUTS,
    LayoutRegistry,
    LayoutStyle,
    compute_layout,
    leading_blank_days,
    week_number,
)
from calrender.profiles import (
    METRIC_PROFILES,
    NORMAL_METRICS,
    resolve_page_profile,
)


class LayoutCoverageTests(unittest.TestCase):
    def test_every_style_places_every_day_once(self) -> None:
        for style in LAYOUTS.style_ids():
            for year in (2024, 2025):
                with self.subTest(style=style, year=year):
                    layout = compute_layout(year, style=style)
                    days = [day_cell.day for day_cell in layout.days]
                    expected_count = 366 if calendar.isleap(year) else 365
                    self.assertEqual(len(days), expected_count)
                    self.assertEqual(len(set(days)), expected_count)
                    self.assertEqual(days[0], date(year, 1, 1))
                    self.assertEqual(days[-1], date(year, 12, 31))

    def test_leap_february_has_twenty_nine_cells(self) -> None:
        layout = compute_layout(2024)
        february = [day_cell for day_cell in layout.days if day_cell.day.month == 2]
        self.assertEqual(len(february), 29)

    def test_cells_fit_inside_the_canvas(self) -> None:
        for style in LAYOUTS.style_ids():
            layout = compute_layout(2025, style=style, show_week_numbers=True)
            for day_cell in layout.days:
                self.assertGreaterEqual(day_cell.cell.x, 0, msg=style)
                self.assertLessEqual(day_cell.cell.right, layout.width, msg=style)
                self.assertLessEqual(day_cell.cell.bottom, layout.height, msg=style)

    def test_cell_for_returns_the_day_cell(self) -> None:
        layout = compute_layout(2025, style="grid")
        cell = layout.cell_for(date(2025, 3, 10))
        self.assertEqual(cell.x, NORMAL_METRICS.label_width + 9 * NORMAL_METRICS.cell_width)


class WeekdayGridTests(unittest.TestCase):
    def test_columns_align_with_weekdays(self) -> None:
        for first_day in (calendar.SUNDAY, calendar.MONDAY):
            layout = compute_layout(2025, style="weekday-grid", first_day_of_week=first_day)
            metrics = layout.metrics
            for day_cell in layout.days:
                column = round((day_cell.cell.x - metrics.label_width) / metrics.cell_width)
                self.assertLess(column, 37)
                self.assertEqual(column % 7, (day_cell.day.weekday() - first_day) % 7)

    def test_header_row_repeats_weekdays(self) -> None:
        layout = compute_layout(2025, style="weekday-grid", first_day_of_week=calendar.MONDAY)
        self.assertEqual(len(layout.weekday_headers), 37)
        self.assertEqual(layout.weekday_headers[0].weekday, calendar.MONDAY)
        self.assertEqual(layout.weekday_headers[7].weekday, calendar.MONDAY)
        self.assertFalse(layout.day_names_in_cells)

    def test_month_labels_are_rotatable(self) -> None:
        layout = compute_layout(2025, style="weekday-grid")
        self.assertTrue(all(label.position.rotatable for label in layout.month_labels))


class DayGridTests(unittest.TestCase):
    def test_day_names_are_drawn_in_cells(self) -> None:
        layout = compute_layout(2024, style="grid")
        self.assertTrue(layout.day_names_in_cells)
        self.assertEqual(layout.weekday_headers, ())
        self.assertEqual(len(layout.blank_cells), 12 * 31 - 366)

    def test_week_numbers_mark_week_starts(self) -> None:
        layout = compute_layout(
            2025, style="grid", first_day_of_week=calendar.MONDAY, show_week_numbers=True
        )
        mondays = sum(
            1
            for offset in range(365)
            if (date(2025, 1, 1) + timedelta(days=offset)).weekday() == calendar.MONDAY
        )
        self.assertEqual(len(layout.week_numbers), mondays)


class MonthGridTests(unittest.TestCase):
    def test_month_blocks_have_labels_and_headers(self) -> None:
        layout = compute_layout(2025)
        self.assertEqual(layout.style, "default")
        self.assertEqual(len(layout.month_labels), 12)
        self.assertEqual(len(layout.weekday_headers), 12 * 7)
        self.assertFalse(any(label.position.rotatable for label in layout.month_labels))

    def test_week_numbers_are_optional(self) -> None:
        self.assertEqual(compute_layout(2025).week_numbers, ())
        self.assertTrue(compute_layout(2025, show_week_numbers=True).week_numbers)

    def test_leading_blank_days(self) -> None:
        # 2025-01-01 is a Wednesday.
        self.assertEqual(leading_blank_days(2025, 1, calendar.SUNDAY), 3)
        self.assertEqual(leading_blank_days(2025, 1, calendar.MONDAY), 2)


class StyleResolutionTests(unittest.TestCase):
    def test_compact_mode_scales_metrics(self) -> None:
        layout = compute_layout(2025, compact=True)
        self.assertEqual(layout.metrics.cell_width, 40)
        self.assertLess(layout.width, compute_layout(2025).width)

    def test_unknown_style_falls_back_to_default(self) -> None:
        with self.assertLogs("calrender.layout", level="WARNING"):
            layout = compute_layout(2025, style="spiral")
        self.assertEqual(layout.style, "default")

    def test_aliases_resolve(self) -> None:
        self.assertEqual(compute_layout(2025, style="traditional").style, "default")
        self.assertEqual(LAYOUTS.resolve_id("month-grid"), "default")

    def test_registry_rejects_duplicates(self) -> None:
        registry = LayoutRegistry()
        style = LayoutStyle(style_id="rows", description="", builder=lambda request: None)
        registry.register(style)
        with self.assertRaises(ValueError):
            registry.register(style)
        with self.assertRaises(ValueError):
            registry.register(LayoutStyle(style_id=" ", description="", builder=style.builder))


class WeekNumberTests(unittest.TestCase):
    def test_monday_start_uses_iso_weeks(self) -> None:
        self.assertEqual(week_number(date(2025, 1, 1), calendar.MONDAY), 1)
        self.assertEqual(week_number(date(2024, 12, 30), calendar.MONDAY), 1)

    def test_sunday_start_counts_from_january_first(self) -> None:
        self.assertEqual(week_number(date(2025, 1, 1), calendar.SUNDAY), 1)
        self.assertEqual(week_number(date(2025, 1, 4), calendar.SUNDAY), 1)
        self.assertEqual(week_number(date(2025, 1, 5), calendar.SUNDAY), 2)


class ProfileTests(unittest.TestCase):
    def test_compact_profile_is_scaled(self) -> None:
        compact = METRIC_PROFILES["compact"]
        self.assertAlmostEqual(compact.cell_width, NORMAL_METRICS.cell_width * 0.8)
        self.assertAlmostEqual(compact.day_font_size, NORMAL_METRICS.day_font_size * 0.8)

    def test_scale_factor_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            NORMAL_METRICS.scaled("broken", 0)

    def test_page_profiles(self) -> None:
        poster = resolve_page_profile("poster")
        self.assertEqual(poster.pagesize, (35 * 72, 23 * 72))
        self.assertEqual(poster.printable_width_inches, 34)
        letter = resolve_page_profile("letter")
        self.assertEqual(letter.printable_height_inches, 7.5)
        with self.assertRaisesRegex(ValueError, "unknown page"):
            resolve_page_profile("a0")


if __name__ == "__main__":
    unittest.main()
