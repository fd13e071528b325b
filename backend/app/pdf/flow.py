"""
Vertical page flow.

PageFlow owns the cursor for one document build. Every atomic unit (a
text line, a table row, an image) asks for room first; when the unit would
cross the bottom margin a new page is started, the cursor returns to the
top margin and the page chrome is redrawn. Units are never split and there
is no look-ahead beyond the unit being placed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from reportlab.lib.pagesizes import A4

from app.pdf.document import BLACK, Document, ImageBox, Line, Page, Rect, TextRun
from app.pdf.table import Column, TableStyle, draw_table
from app.pdf.text import layout_paragraph, measure


@dataclass(frozen=True)
class PageGeometry:
    width: float = A4[0]
    height: float = A4[1]
    top: float = 740.0
    bottom: float = 100.0
    left: float = 72.0
    right: float = 72.0

    @property
    def content_width(self) -> float:
        return self.width - self.left - self.right

    @property
    def usable_height(self) -> float:
        return self.top - self.bottom


ChromeFn = Callable[["PageFlow", Page], None]


class PageFlow:
    def __init__(self, document: Document, geometry: PageGeometry | None = None, chrome: ChromeFn | None = None):
        self.document = document
        self.geometry = geometry or PageGeometry()
        self.chrome = chrome
        self.page: Page | None = None
        self.y = self.geometry.top

    @property
    def page_number(self) -> int:
        return self.page.number if self.page is not None else 0

    # ----------------------------
    # Page breaks
    # ----------------------------

    def new_page(self, chrome: bool = True) -> Page:
        self.page = self.document.add_page(self.geometry.width, self.geometry.height)
        self.y = self.geometry.top
        if chrome and self.chrome is not None:
            self.chrome(self, self.page)
        return self.page

    def fits(self, height: float) -> bool:
        return self.page is not None and self.y - height >= self.geometry.bottom

    def ensure_room(self, height: float) -> bool:
        """Start a new page if a unit of `height` does not fit. Returns True on a break."""
        if self.page is None:
            self.new_page()
            return True
        if self.fits(height):
            return False
        # a unit taller than a whole page is placed at the top and allowed to overhang
        if self.y >= self.geometry.top:
            return False
        self.new_page()
        return True

    def advance(self, height: float) -> float:
        """Reserve a band of `height` below the cursor and return its top y."""
        self.ensure_room(height)
        top = self.y
        self.y -= height
        return top

    def space(self, height: float) -> None:
        """Blank gap between units. Never breaks; the next unit checks for room."""
        if self.page is not None and self.y < self.geometry.top:
            self.y -= height

    # ----------------------------
    # Absolute placement on the current page (chrome, table cells)
    # ----------------------------

    def place_text(self, x: float, y: float, text: str, font: str, size: float, color: str = BLACK) -> TextRun:
        return self.page.add(TextRun(x, y, text, font, size, color))

    def place_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.5, color: str = BLACK) -> Line:
        return self.page.add(Line(x1, y1, x2, y2, width, color))

    def place_rect(self, x: float, y: float, w: float, h: float, **kwargs) -> Rect:
        return self.page.add(Rect(x, y, w, h, **kwargs))

    def place_image(self, path: str, x: float, y: float, w: float, h: float) -> ImageBox:
        return self.page.add(ImageBox(path, x, y, w, h))

    # ----------------------------
    # Flowing content
    # ----------------------------

    def _aligned_x(self, text: str, font: str, size: float, align: str, x: float, width: float) -> float:
        if align == "center":
            return x + (width - measure(text, font, size)) / 2
        if align == "right":
            return x + width - measure(text, font, size)
        return x

    def draw_text(
        self,
        text: str,
        font: str,
        size: float,
        *,
        leading: float | None = None,
        indent: float = 0.0,
        align: str = "left",
        color: str = BLACK,
    ) -> TextRun:
        """One line of text as a single unit; the baseline sits `size` below the cursor."""
        leading = leading if leading is not None else size * 1.4
        top = self.advance(leading)
        x = self._aligned_x(text, font, size, align, self.geometry.left + indent, self.geometry.content_width - indent)
        return self.place_text(x, top - size, text, font, size, color)

    def draw_columns(
        self,
        cells: list[tuple[float, str, str]],
        size: float,
        *,
        leading: float | None = None,
        color: str = BLACK,
    ) -> None:
        """Several runs sharing one baseline, given as (x offset, text, font)."""
        leading = leading if leading is not None else size * 1.4
        top = self.advance(leading)
        for offset, text, font in cells:
            if text:
                self.place_text(self.geometry.left + offset, top - size, text, font, size, color)

    def draw_paragraph(
        self,
        text: str,
        font: str,
        size: float,
        leading: float,
        *,
        justify: bool = True,
        indent: float = 0.0,
        color: str = BLACK,
    ) -> int:
        x = self.geometry.left + indent
        lines = layout_paragraph(text, self.geometry.content_width - indent, font, size, justify)
        for line in lines:
            top = self.advance(leading)
            if line.justified:
                for word, offset in line.words:
                    self.place_text(x + offset, top - size, word, font, size, color)
            else:
                self.place_text(x, top - size, line.text, font, size, color)
        return len(lines)

    def draw_rule(self, *, gap: float = 8.0, width: float = 0.5, color: str = BLACK) -> None:
        top = self.advance(gap)
        y = top - gap / 2
        self.place_line(self.geometry.left, y, self.geometry.width - self.geometry.right, y, width, color)

    def draw_image(self, path: str, width: float, height: float, *, align: str = "left") -> ImageBox:
        top = self.advance(height)
        if align == "right":
            x = self.geometry.width - self.geometry.right - width
        elif align == "center":
            x = (self.geometry.width - width) / 2
        else:
            x = self.geometry.left
        return self.place_image(path, x, top - height, width, height)

    def draw_table(self, columns: list[Column], rows: list[list[str]], style: TableStyle | None = None) -> float:
        return draw_table(self, columns, rows, style)
