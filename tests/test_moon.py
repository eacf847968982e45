from __future__ import annotations

import re
import unittest
from datetime import date, timedelta
from xml.etree import ElementTree

from calrender.astronomy import MoonPhase, is_moon_phase_day, moon_phases_for_year
from calrender.moon import (
    generate_moon_illumination_svg,
    is_large_moon,
    should_show_moon,
    terminator_path,
)
from calrender.options import Configuration, MoonSettings

_ARC_FLAGS_RE = re.compile(r"A [\d.]+ [\d.]+ 0 0 (\d) ")


def _config(**moon_values: object) -> Configuration:
    return Configuration(year=2025, moon=MoonSettings(**moon_values))


def _first_phase_day(phase: MoonPhase) -> date:
    return next(item.day for item in moon_phases_for_year(2025) if item.phase is phase)


def _first_plain_day() -> date:
    day = date(2025, 1, 1)
    while is_moon_phase_day(day):
        day += timedelta(days=1)
    return day


class VisibilityTests(unittest.TestCase):
    def test_display_modes(self) -> None:
        full_moon = _first_phase_day(MoonPhase.FULL)
        quarter = _first_phase_day(MoonPhase.FIRST_QUARTER)
        plain = _first_plain_day()

        illumination = _config(display_mode="illumination")
        self.assertTrue(all(should_show_moon(illumination, day) for day in (full_moon, plain)))

        phases = _config(display_mode="phases")
        self.assertTrue(should_show_moon(phases, full_moon))
        self.assertTrue(should_show_moon(phases, quarter))
        self.assertFalse(should_show_moon(phases, plain))

        full_only = _config(display_mode="full-only")
        self.assertTrue(should_show_moon(full_only, full_moon))
        self.assertFalse(should_show_moon(full_only, quarter))

        self.assertFalse(should_show_moon(_config(), full_moon))

    def test_large_moon(self) -> None:
        self.assertTrue(is_large_moon(_config(display_mode="illumination", size=20)))
        self.assertFalse(is_large_moon(_config(display_mode="illumination", size=10)))
        self.assertFalse(is_large_moon(_config(size=40)))


class TerminatorPathTests(unittest.TestCase):
    def test_full_moon_covers_the_disc(self) -> None:
        self.assertEqual(
            terminator_path(0.5, 10),
            "M 0 -10.00 A 10.00 10.00 0 0 0 0 10.00 A 10.00 10.00 0 0 0 0 -10.00 Z",
        )

    def test_sweep_flags_follow_phase(self) -> None:
        cases = {
            0.1: ("1", "0"),  # waxing crescent
            0.4: ("1", "1"),  # waxing gibbous
            0.6: ("0", "0"),  # waning gibbous
            0.9: ("0", "1"),  # waning crescent
        }
        for phase, flags in cases.items():
            self.assertEqual(tuple(_ARC_FLAGS_RE.findall(terminator_path(phase, 10))), flags)

    def test_terminator_width_shrinks_toward_quarter(self) -> None:
        crescent = terminator_path(0.05, 10)
        near_quarter = terminator_path(0.24, 10)
        crescent_rx = float(crescent.split(" A ")[2].split()[0])
        quarter_rx = float(near_quarter.split(" A ")[2].split()[0])
        self.assertGreater(crescent_rx, quarter_rx)


class MoonMarkupTests(unittest.TestCase):
    def test_disc_layers_in_order(self) -> None:
        config = _config(display_mode="illumination", dark_color="#111111", light_color="#eeeeee")
        markup = generate_moon_illumination_svg(date(2025, 1, 13), 40, 60, 0, 0, config)
        group = ElementTree.fromstring(markup)
        self.assertEqual(group.get("class"), "moon")
        self.assertEqual(group.get("transform"), "translate(40.00 60.00)")
        children = list(group)
        self.assertEqual([child.tag for child in children], ["circle", "path", "circle"])
        self.assertEqual(children[0].get("fill"), "#111111")
        self.assertEqual(children[1].get("fill"), "#eeeeee")
        self.assertEqual(children[2].get("fill"), "none")
        self.assertEqual(children[2].get("stroke-width"), "1.5")

    def test_colors_are_attribute_escaped(self) -> None:
        config = _config(
            display_mode="illumination", border_color='a"b', dark_color="<d>", light_color="&l"
        )
        group = ElementTree.fromstring(
            generate_moon_illumination_svg(date(2025, 1, 13), 0, 0, 0, 0, config)
        )
        disc, lit, outline = list(group)
        self.assertEqual(disc.get("fill"), "<d>")
        self.assertEqual(lit.get("fill"), "&l")
        self.assertEqual(outline.get("stroke"), 'a"b')

    def test_zero_border_omits_outline(self) -> None:
        config = _config(display_mode="illumination", border_width=0)
        markup = generate_moon_illumination_svg(date(2025, 1, 13), 0, 0, 0, 0, config)
        self.assertEqual(markup.count("<circle"), 1)

    def test_observer_location_rotates_disc(self) -> None:
        config = _config(display_mode="illumination")
        north = generate_moon_illumination_svg(date(2025, 3, 5), 0, 0, 52.0, 4.9, config)
        south = generate_moon_illumination_svg(date(2025, 3, 5), 0, 0, -33.9, 151.2, config)
        self.assertIn("rotate(", north)
        self.assertIn("rotate(", south)
        self.assertNotEqual(north, south)

    def test_radius_follows_size(self) -> None:
        config = _config(display_mode="illumination", size=30)
        markup = generate_moon_illumination_svg(date(2025, 1, 1), 0, 0, 0, 0, config)
        self.assertIn('r="15.00"', markup)


if __name__ == "__main__":
    unittest.main()
