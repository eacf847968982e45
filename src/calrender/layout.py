"""Layout geometry for full-year calendars."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from functools import cached_property

from .config import MARGIN_INCHES, PAGE_HEIGHT_INCHES, PAGE_WIDTH_INCHES
from .profiles import MetricProfile, resolve_metrics

logger = logging.getLogger(__name__)

PRINTABLE_WIDTH_INCHES = PAGE_WIDTH_INCHES - 2 * MARGIN_INCHES
PRINTABLE_HEIGHT_INCHES = PAGE_HEIGHT_INCHES - 2 * MARGIN_INCHES

MONTHS_PER_ROW = 4
WEEKS_PER_MONTH = 6
WEEKDAY_GRID_COLUMNS = 37
DAY_GRID_COLUMNS = 31


@dataclass(frozen=True)
class Cell:
    """Axis-aligned rectangle in SVG user units; y grows downward."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


@dataclass(frozen=True)
class DayCell:
    day: date
    cell: Cell


@dataclass(frozen=True)
class TextAnchor:
    """A label position; ``rotatable`` labels may be turned 90 degrees."""

    text_x: float
    text_y: float
    anchor: str = "middle"
    rotatable: bool = False


@dataclass(frozen=True)
class MonthLabel:
    month: int
    position: TextAnchor


@dataclass(frozen=True)
class WeekdayHeader:
    weekday: int
    position: TextAnchor


@dataclass(frozen=True)
class WeekNumberLabel:
    number: int
    position: TextAnchor


@dataclass(frozen=True)
class CalendarLayout:
    """Computed geometry for one year.

    ``day_names_in_cells`` is True for layouts without a weekday header row.
    """

    style: str
    year: int
    width: float
    height: float
    metrics: MetricProfile
    days: tuple[DayCell, ...]
    blank_cells: tuple[Cell, ...]
    month_labels: tuple[MonthLabel, ...]
    weekday_headers: tuple[WeekdayHeader, ...]
    week_numbers: tuple[WeekNumberLabel, ...]
    day_names_in_cells: bool

    @cached_property
    def _cells_by_day(self) -> dict[date, Cell]:
        return {day_cell.day: day_cell.cell for day_cell in self.days}

    def cell_for(self, day: date) -> Cell:
        return self._cells_by_day[day]

    @property
    def title_position(self) -> TextAnchor:
        return TextAnchor(
            text_x=self.width / 2,
            text_y=self.metrics.header_height * 0.65,
        )


@dataclass(frozen=True)
class LayoutRequest:
    """Inputs a layout builder needs from a configuration."""

    year: int
    first_day_of_week: int = calendar.SUNDAY
    compact: bool = False
    show_week_numbers: bool = False


LayoutBuilder = Callable[[LayoutRequest], CalendarLayout]


@dataclass(frozen=True)
class LayoutStyle:
    style_id: str
    description: str
    builder: LayoutBuilder
    aliases: tuple[str, ...] = ()


@dataclass
class LayoutRegistry:
    """In-memory registry of layout styles."""

    _styles: dict[str, LayoutStyle] = field(default_factory=dict)
    _aliases: dict[str, str] = field(default_factory=dict)

    def register(self, style: LayoutStyle) -> None:
        style_id = style.style_id.strip()
        if not style_id:
            msg = "style_id cannot be empty."
            raise ValueError(msg)
        if style_id in self._styles or style_id in self._aliases:
            msg = f"layout '{style_id}' is already registered."
            raise ValueError(msg)
        for alias in style.aliases:
            if alias in self._styles or alias in self._aliases or alias == style_id:
                msg = f"layout alias '{alias}' is already registered."
                raise ValueError(msg)

        self._styles[style_id] = style
        for alias in style.aliases:
            self._aliases[alias] = style_id

    def resolve_id(self, style: str) -> str:
        if style in self._styles:
            return style
        if style in self._aliases:
            return self._aliases[style]
        valid = ", ".join(sorted(self._styles))
        msg = f"unknown layout '{style}'. Valid layouts: {valid}."
        raise ValueError(msg)

    def get(self, style: str) -> LayoutStyle:
        return self._styles[self.resolve_id(style)]

    def style_ids(self) -> tuple[str, ...]:
        return tuple(self._styles)


def week_number(day: date, first_weekday: int = calendar.SUNDAY) -> int:
    """Return the week of year for ``day``.

    Monday-first weeks use ISO numbering; other starts count the week holding
    January 1 as week 1.
    """
    if first_weekday == calendar.MONDAY:
        return day.isocalendar()[1]
    jan_first = date(day.year, 1, 1)
    offset = (jan_first.weekday() - first_weekday) % 7
    return (day.timetuple().tm_yday - 1 + offset) // 7 + 1


def leading_blank_days(year: int, month: int, first_weekday: int) -> int:
    """Number of cells before the 1st so that columns line up with weekdays."""
    return (date(year, month, 1).weekday() - first_weekday) % 7


def _days_of_month(year: int, month: int) -> list[date]:
    _, days = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, days + 1)]


def _month_grid_layout(request: LayoutRequest) -> CalendarLayout:
    metrics = resolve_metrics(compact=request.compact)
    cell_w = metrics.cell_width
    cell_h = metrics.cell_height
    gap = metrics.month_gap
    week_column = cell_w * 0.6 if request.show_week_numbers else 0.0
    title_height = metrics.month_font_size * 1.6

    block_width = week_column + 7 * cell_w
    block_height = title_height + metrics.weekday_header_height + WEEKS_PER_MONTH * cell_h
    month_rows = 12 // MONTHS_PER_ROW

    days: list[DayCell] = []
    blanks: list[Cell] = []
    month_labels: list[MonthLabel] = []
    weekday_headers: list[WeekdayHeader] = []
    week_numbers: list[WeekNumberLabel] = []

    for month in range(1, 13):
        origin_x = gap + ((month - 1) % MONTHS_PER_ROW) * (block_width + gap)
        origin_y = metrics.header_height + ((month - 1) // MONTHS_PER_ROW) * (block_height + gap)
        grid_x = origin_x + week_column
        grid_y = origin_y + title_height + metrics.weekday_header_height

        month_labels.append(
            MonthLabel(
                month=month,
                position=TextAnchor(
                    text_x=origin_x + block_width / 2, text_y=origin_y + title_height * 0.7
                ),
            )
        )
        for column in range(7):
            weekday_headers.append(
                WeekdayHeader(
                    weekday=(request.first_day_of_week + column) % 7,
                    position=TextAnchor(
                        text_x=grid_x + column * cell_w + cell_w / 2,
                        text_y=grid_y - metrics.weekday_header_height * 0.3,
                    ),
                )
            )

        lead = leading_blank_days(request.year, month, request.first_day_of_week)
        month_days = _days_of_month(request.year, month)
        used_slots = lead + len(month_days)
        used_rows = -(-used_slots // 7)
        for slot in range(used_rows * 7):
            cell = Cell(
                x=grid_x + (slot % 7) * cell_w,
                y=grid_y + (slot // 7) * cell_h,
                width=cell_w,
                height=cell_h,
            )
            if lead <= slot < used_slots:
                days.append(DayCell(day=month_days[slot - lead], cell=cell))
            else:
                blanks.append(cell)

        if request.show_week_numbers:
            for row in range(used_rows):
                first_slot = max(row * 7, lead)
                number = week_number(month_days[first_slot - lead], request.first_day_of_week)
                week_numbers.append(
                    WeekNumberLabel(
                        number=number,
                        position=TextAnchor(
                            text_x=origin_x + week_column / 2,
                            text_y=grid_y + row * cell_h + cell_h / 2,
                        ),
                    )
                )

    return CalendarLayout(
        style="default",
        year=request.year,
        width=gap + MONTHS_PER_ROW * (block_width + gap),
        height=metrics.header_height + month_rows * (block_height + gap),
        metrics=metrics,
        days=tuple(days),
        blank_cells=tuple(blanks),
        month_labels=tuple(month_labels),
        weekday_headers=tuple(weekday_headers),
        week_numbers=tuple(week_numbers),
        day_names_in_cells=False,
    )


def _row_month_label(metrics: MetricProfile, month: int, top: float) -> MonthLabel:
    return MonthLabel(
        month=month,
        position=TextAnchor(
            text_x=metrics.label_width / 2,
            text_y=top + metrics.cell_height / 2 + metrics.month_font_size / 3,
            rotatable=True,
        ),
    )


def _corner_week_number(metrics: MetricProfile, number: int, cell: Cell) -> WeekNumberLabel:
    return WeekNumberLabel(
        number=number,
        position=TextAnchor(
            text_x=cell.right - 3,
            text_y=cell.y + metrics.week_number_font_size + 2,
            anchor="end",
        ),
    )


def _weekday_grid_layout(request: LayoutRequest) -> CalendarLayout:
    metrics = resolve_metrics(compact=request.compact)
    cell_w = metrics.cell_width
    cell_h = metrics.cell_height
    grid_x = metrics.label_width
    grid_y = metrics.header_height + metrics.weekday_header_height

    weekday_headers = tuple(
        WeekdayHeader(
            weekday=(request.first_day_of_week + column) % 7,
            position=TextAnchor(
                text_x=grid_x + column * cell_w + cell_w / 2,
                text_y=grid_y - metrics.weekday_header_height * 0.3,
            ),
        )
        for column in range(WEEKDAY_GRID_COLUMNS)
    )

    days: list[DayCell] = []
    blanks: list[Cell] = []
    month_labels: list[MonthLabel] = []
    week_numbers: list[WeekNumberLabel] = []
    for month in range(1, 13):
        top = grid_y + (month - 1) * cell_h
        month_labels.append(_row_month_label(metrics, month, top))
        lead = leading_blank_days(request.year, month, request.first_day_of_week)
        month_days = _days_of_month(request.year, month)
        for column in range(WEEKDAY_GRID_COLUMNS):
            cell = Cell(x=grid_x + column * cell_w, y=top, width=cell_w, height=cell_h)
            index = column - lead
            if not 0 <= index < len(month_days):
                blanks.append(cell)
                continue
            day = month_days[index]
            days.append(DayCell(day=day, cell=cell))
            if request.show_week_numbers and (column % 7 == 0 or index == 0):
                number = week_number(day, request.first_day_of_week)
                week_numbers.append(_corner_week_number(metrics, number, cell))

    return CalendarLayout(
        style="weekday-grid",
        year=request.year,
        width=grid_x + WEEKDAY_GRID_COLUMNS * cell_w + metrics.month_gap,
        height=grid_y + 12 * cell_h + metrics.month_gap,
        metrics=metrics,
        days=tuple(days),
        blank_cells=tuple(blanks),
        month_labels=tuple(month_labels),
        weekday_headers=weekday_headers,
        week_numbers=tuple(week_numbers),
        day_names_in_cells=False,
    )


def _day_grid_layout(request: LayoutRequest) -> CalendarLayout:
    metrics = resolve_metrics(compact=request.compact)
    cell_w = metrics.cell_width
    cell_h = metrics.cell_height
    grid_x = metrics.label_width
    grid_y = metrics.header_height

    days: list[DayCell] = []
    blanks: list[Cell] = []
    month_labels: list[MonthLabel] = []
    week_numbers: list[WeekNumberLabel] = []
    for month in range(1, 13):
        top = grid_y + (month - 1) * cell_h
        month_labels.append(_row_month_label(metrics, month, top))
        month_days = _days_of_month(request.year, month)
        for column in range(DAY_GRID_COLUMNS):
            cell = Cell(x=grid_x + column * cell_w, y=top, width=cell_w, height=cell_h)
            if column >= len(month_days):
                blanks.append(cell)
                continue
            day = month_days[column]
            days.append(DayCell(day=day, cell=cell))
            if request.show_week_numbers and day.weekday() == request.first_day_of_week:
                number = week_number(day, request.first_day_of_week)
                week_numbers.append(_corner_week_number(metrics, number, cell))

    return CalendarLayout(
        style="grid",
        year=request.year,
        width=grid_x + DAY_GRID_COLUMNS * cell_w + metrics.month_gap,
        height=grid_y + 12 * cell_h + metrics.month_gap,
        metrics=metrics,
        days=tuple(days),
        blank_cells=tuple(blanks),
        month_labels=tuple(month_labels),
        weekday_headers=(),
        week_numbers=tuple(week_numbers),
        day_names_in_cells=True,
    )


DEFAULT_LAYOUT = "default"

LAYOUTS = LayoutRegistry()
LAYOUTS.register(
    LayoutStyle(
        style_id="default",
        description="Twelve month blocks, weeks as rows.",
        builder=_month_grid_layout,
        aliases=("traditional", "month-grid"),
    )
)
LAYOUTS.register(
    LayoutStyle(
        style_id="weekday-grid",
        description="One row per month with weekday-aligned columns.",
        builder=_weekday_grid_layout,
    )
)
LAYOUTS.register(
    LayoutStyle(
        style_id="grid",
        description="One row per month with a column per day of month.",
        builder=_day_grid_layout,
    )
)


def compute_layout(
    year: int,
    *,
    style: str = DEFAULT_LAYOUT,
    first_day_of_week: int = calendar.SUNDAY,
    compact: bool = False,
    show_week_numbers: bool = False,
) -> CalendarLayout:
    """Compute the geometry of every day cell; unknown styles use the default layout."""
    try:
        layout_style = LAYOUTS.get(style)
    except ValueError:
        logger.warning("unknown layout '%s'; falling back to '%s'", style, DEFAULT_LAYOUT)
        layout_style = LAYOUTS.get(DEFAULT_LAYOUT)

    layout = layout_style.builder(
        LayoutRequest(
            year=year,
            first_day_of_week=first_day_of_week,
            compact=compact,
            show_week_numbers=show_week_numbers,
        )
    )
    logger.debug(
        "layout %s for %d: %d day cells, %.0fx%.0f units",
        layout.style,
        year,
        len(layout.days),
        layout.width,
        layout.height,
    )
    return layout

