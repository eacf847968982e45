"""Configuration constants for calendar rendering."""

# Print page, in inches. The printable area is the page minus a margin on each side.
PAGE_WIDTH_INCHES = 35.0
PAGE_HEIGHT_INCHES = 23.0
MARGIN_INCHES = 0.5

# SVG user units per inch when wrapping a calendar onto a print page.
UNITS_PER_INCH = 100

# PDF points per inch.
POINTS_PER_INCH = 72

# Raster resolution used when transcoding SVG pages to PDF.
DEFAULT_RASTER_DPI = 150

# Year bounds accepted by Configuration.
MIN_YEAR = 1000
MAX_YEAR = 9999

# File output
DEFAULT_FILENAME_TEMPLATE = "calendar_{year}.{ext}"

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

# Transparent cell fill.
TRANSPARENT = "rgba(255, 255, 255, 0)"

# Color override defaults.
DEFAULT_HOLIDAY_COLOR = "#ff5252"
DEFAULT_CUSTOM_DATE_COLOR = "#4caf50"
DEFAULT_GRID_LINE_COLOR = "#c1c1c1"

# Moon defaults.
DEFAULT_MOON_SIZE = 20.0
DEFAULT_MOON_OFFSET_X = 25.0
DEFAULT_MOON_OFFSET_Y = 36.0
DEFAULT_MOON_BORDER_WIDTH = 1.5
DEFAULT_MOON_BORDER_COLOR = "#c1c1c1"
DEFAULT_MOON_LIGHT_COLOR = "#ffffff"
DEFAULT_MOON_DARK_COLOR = "#dddddd"
MOON_SIZE_RANGE = (4.0, 60.0)
MOON_BORDER_WIDTH_RANGE = (0.0, 10.0)
LARGE_MOON_MIN_SIZE = 15.0

# Emoji fonts. None selects the color set.
EMOJI_FONT_MONO = "noto-mono"
EMOJI_FONT_COLOR = "noto-color"
EMOJI_FONT_MONO_PREFIX = "mono-"
EMOJI_FAMILY_MONO = "'Noto Emoji', 'DejaVu Sans', 'Segoe UI Symbol', 'Symbola', sans-serif"
EMOJI_FAMILY_COLOR = "'Noto Color Emoji', 'Noto Emoji', 'DejaVu Sans', 'Symbola', sans-serif"
TEXT_FONT_FAMILY = "Helvetica, Arial, sans-serif"

# Fill colors for mono-<name> emoji font variants.
MONO_VARIANT_COLORS = {
    "red": "#DC2626",
    "blue": "#2563EB",
    "green": "#16A34A",
    "orange": "#EA580C",
    "purple": "#9333EA",
    "pink": "#EC4899",
    "teal": "#0D9488",
    "brown": "#92400E",
    "navy": "#1E3A5F",
    "maroon": "#7F1D1D",
    "olive": "#4D7C0F",
    "coral": "#F97316",
}
MONO_DEFAULT_COLOR = "#000000"

# Title text. Long titles are cut to TITLE_TRUNCATE_KEEP characters plus an ellipsis.
TITLE_MAX_CHARS = 10
TITLE_TRUNCATE_KEEP = 9
WRAP_MIN_CHARS = 8
WRAP_MAX_LINES = 3
ELLIPSIS = "…"

# Cell insets for emoji anchors.
EMOJI_NEAR_INSET = 5
EMOJI_FAR_INSET = 15
EMOJI_TOP_BASELINE = 13
EMOJI_VERTICAL_NUDGE = 5

EMOJI_ANCHORS = (
    "top-left",
    "top-center",
    "top-right",
    "middle-left",
    "middle-center",
    "middle-right",
    "bottom-left",
    "bottom-center",
    "bottom-right",
)
DEFAULT_EMOJI_ANCHOR = "bottom-left"

EVENT_DISPLAY_MODES = ("none", "large", "large-text", "small", "small-text", "text")
MOON_DISPLAY_MODES = ("none", "illumination", "phases", "full-only")
