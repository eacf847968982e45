"""Exception types raised by the renderer."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A configuration is structurally invalid and cannot be rendered."""


class PdfConversionError(RuntimeError):
    """SVG to PDF transcoding failed."""
