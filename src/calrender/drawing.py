"""Drawing primitives and the ReportLab backend used for PDF output."""

from __future__ import annotations

from typing import Any, BinaryIO, Protocol

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas


class DrawingPrimitives(Protocol):
    """Backend-agnostic page operations used by the PDF transcoder."""

    def set_fill_color(self, color: Any) -> None: ...
    def rect(
        self, x: float, y: float, width: float, height: float, *, fill: int = 0, stroke: int = 1
    ) -> None: ...
    def draw_image(
        self, image: ImageReader, x: float, y: float, width: float, height: float
    ) -> None: ...
    def set_title(self, title: str) -> None: ...
    def set_creator(self, creator: str) -> None: ...
    def show_page(self) -> None: ...
    def save(self) -> None: ...


class ReportLabPrimitives:
    """ReportLab-backed implementation of DrawingPrimitives."""

    def __init__(self, target: canvas.Canvas) -> None:
        self._target = target

    def set_fill_color(self, color: Any) -> None:
        self._target.setFillColor(color)

    def rect(
        self, x: float, y: float, width: float, height: float, *, fill: int = 0, stroke: int = 1
    ) -> None:
        self._target.rect(x, y, width, height, fill=fill, stroke=stroke)

    def draw_image(
        self, image: ImageReader, x: float, y: float, width: float, height: float
    ) -> None:
        self._target.drawImage(image, x, y, width=width, height=height)

    def set_title(self, title: str) -> None:
        self._target.setTitle(title)

    def set_creator(self, creator: str) -> None:
        self._target.setCreator(creator)

    def show_page(self) -> None:
        self._target.showPage()

    def save(self) -> None:
        self._target.save()


def create_reportlab_primitives(
    output: str | BinaryIO,
    *,
    pagesize: tuple[float, float],
) -> ReportLabPrimitives:
    """Create a ReportLab-backed renderer writing to a path or binary stream."""
    return ReportLabPrimitives(canvas.Canvas(output, pagesize=pagesize))
