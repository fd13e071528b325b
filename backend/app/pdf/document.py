"""
Document model for generated quotations.

Layout code appends drawing primitives to pages; nothing touches ReportLab
until render_pdf() serializes the finished document onto a canvas.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from app.core.errors import AssetMissingError

BLACK = "#000000"


@dataclass(frozen=True)
class TextRun:
    x: float
    y: float
    text: str
    font: str
    size: float
    color: str = BLACK


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.5
    color: str = BLACK


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    stroke: str | None = BLACK
    fill: str | None = None
    line_width: float = 0.5


@dataclass(frozen=True)
class ImageBox:
    path: str
    x: float
    y: float
    width: float
    height: float


@dataclass
class Page:
    width: float
    height: float
    number: int
    items: list = field(default_factory=list)

    def add(self, item):
        self.items.append(item)
        return item

    def text_runs(self) -> list[TextRun]:
        return [i for i in self.items if isinstance(i, TextRun)]

    def text(self) -> str:
        return " ".join(t.text for t in self.text_runs())


@dataclass
class Document:
    title: str = ""
    author: str = ""
    pages: list[Page] = field(default_factory=list)

    def add_page(self, width: float = A4[0], height: float = A4[1]) -> Page:
        page = Page(width=width, height=height, number=len(self.pages) + 1)
        self.pages.append(page)
        return page

    @property
    def page_count(self) -> int:
        return len(self.pages)


def _draw_item(c: canvas.Canvas, item, images: dict[str, ImageReader]) -> None:
    c.saveState()
    if isinstance(item, TextRun):
        c.setFont(item.font, item.size)
        c.setFillColor(HexColor(item.color))
        c.drawString(item.x, item.y, item.text)
    elif isinstance(item, Line):
        c.setStrokeColor(HexColor(item.color))
        c.setLineWidth(item.width)
        c.line(item.x1, item.y1, item.x2, item.y2)
    elif isinstance(item, Rect):
        if item.fill:
            c.setFillColor(HexColor(item.fill))
        if item.stroke:
            c.setStrokeColor(HexColor(item.stroke))
            c.setLineWidth(item.line_width)
        c.rect(
            item.x,
            item.y,
            item.width,
            item.height,
            fill=1 if item.fill else 0,
            stroke=1 if item.stroke else 0,
        )
    elif isinstance(item, ImageBox):
        reader = images.get(item.path)
        if reader is None:
            if not Path(item.path).is_file():
                raise AssetMissingError(item.path)
            reader = images[item.path] = ImageReader(item.path)
        c.drawImage(reader, item.x, item.y, width=item.width, height=item.height, mask="auto")
    else:
        raise TypeError(f"unsupported primitive: {type(item).__name__}")
    c.restoreState()


def render_pdf(doc: Document) -> bytes:
    buf = BytesIO()
    first = doc.pages[0] if doc.pages else None
    c = canvas.Canvas(buf, pagesize=(first.width, first.height) if first else A4)
    c.setTitle(doc.title)
    c.setAuthor(doc.author)

    images: dict[str, ImageReader] = {}
    for page in doc.pages:
        c.setPageSize((page.width, page.height))
        for item in page.items:
            _draw_item(c, item, images)
        c.showPage()

    c.save()
    return buf.getvalue()
