"""Page and metric profiles for calendar rendering."""

from __future__ import annotations

from dataclasses import dataclass

from .config import MARGIN_INCHES, PAGE_HEIGHT_INCHES, PAGE_WIDTH_INCHES, POINTS_PER_INCH


@dataclass(frozen=True)
class PageProfile:
    """Physical print page with a uniform margin."""

    name: str
    width_inches: float
    height_inches: float
    margin_inches: float = MARGIN_INCHES

    @property
    def printable_width_inches(self) -> float:
        return self.width_inches - 2 * self.margin_inches

    @property
    def printable_height_inches(self) -> float:
        return self.height_inches - 2 * self.margin_inches

    @property
    def pagesize(self) -> tuple[float, float]:
        """Page size in PDF points."""
        return (self.width_inches * POINTS_PER_INCH, self.height_inches * POINTS_PER_INCH)


@dataclass(frozen=True)
class MetricProfile:
    """Cell and font metrics shared by every layout."""

    name: str
    cell_width: float = 50
    cell_height: float = 75
    header_height: float = 100
    label_width: float = 100
    month_gap: float = 20
    weekday_header_height: float = 16
    year_font_size: float = 48
    month_font_size: float = 20
    day_font_size: float = 12
    day_name_font_size: float = 8
    week_number_font_size: float = 7
    title_font_size: float = 7

    def scaled(self, name: str, factor: float) -> MetricProfile:
        """Return a copy with every length multiplied by ``factor``."""
        if factor <= 0:
            msg = "metric scale factor must be > 0."
            raise ValueError(msg)
        return MetricProfile(
            name=name,
            cell_width=self.cell_width * factor,
            cell_height=self.cell_height * factor,
            header_height=self.header_height * factor,
            label_width=self.label_width * factor,
            month_gap=self.month_gap * factor,
            weekday_header_height=self.weekday_header_height * factor,
            year_font_size=self.year_font_size * factor,
            month_font_size=self.month_font_size * factor,
            day_font_size=self.day_font_size * factor,
            day_name_font_size=self.day_name_font_size * factor,
            week_number_font_size=self.week_number_font_size * factor,
            title_font_size=self.title_font_size * factor,
        )


PAGE_PROFILES = {
    "poster": PageProfile(
        name="poster",
        width_inches=PAGE_WIDTH_INCHES,
        height_inches=PAGE_HEIGHT_INCHES,
    ),
    "letter": PageProfile(
        name="letter",
        width_inches=11.0,
        height_inches=8.5,
    ),
}

DEFAULT_PAGE = "poster"

NORMAL_METRICS = MetricProfile(name="normal")

METRIC_PROFILES = {
    "normal": NORMAL_METRICS,
    "compact": NORMAL_METRICS.scaled("compact", 0.8),
}


def resolve_page_profile(page: str = DEFAULT_PAGE) -> PageProfile:
    """Resolve a built-in page profile name."""
    if page not in PAGE_PROFILES:
        msg = f"unknown page '{page}'. Valid pages: {', '.join(sorted(PAGE_PROFILES))}."
        raise ValueError(msg)
    return PAGE_PROFILES[page]


def resolve_metrics(*, compact: bool) -> MetricProfile:
    """Return the metric profile for normal or compact rendering."""
    return METRIC_PROFILES["compact" if compact else "normal"]
