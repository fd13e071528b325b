"""
Fixed-column grid tables drawn through a PageFlow.

Column widths are absolute. Cell text is wrapped inside its column and a
row is as tall as its tallest cell. Rows are atomic flow units; when a row
starts a new page the header row is drawn again first.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from app.pdf.text import measure, wrap

if TYPE_CHECKING:
    from app.pdf.flow import PageFlow


@dataclass(frozen=True)
class Column:
    width: float
    header: str = ""
    align: str = "left"


@dataclass(frozen=True)
class TableStyle:
    font: str = "Helvetica"
    bold_font: str = "Helvetica-Bold"
    size: float = 9.0
    leading: float = 11.0
    padding: float = 4.0
    border_color: str = "#000000"
    border_width: float = 0.5
    header_fill: str | None = "#F1F5F9"
    stripe_fill: str | None = None
    show_header: bool = True
    repeat_header: bool = True
    # body row indexes drawn bold on the header fill (totals)
    shaded_rows: frozenset[int] = field(default_factory=frozenset)


def cell_lines(text: str, width: float, font: str, size: float, padding: float) -> list[str]:
    inner = width - 2 * padding
    lines: list[str] = []
    for part in str(text if text is not None else "").split("\n"):
        lines.extend(wrap(part, inner, font, size) or [""])
    return lines or [""]


def row_height(line_count: int, style: TableStyle) -> float:
    return max(1, line_count) * style.leading + 2 * style.padding


def _cell_x(text: str, col: Column, x: float, font: str, style: TableStyle) -> float:
    if col.align == "right":
        return x + col.width - style.padding - measure(text, font, style.size)
    if col.align == "center":
        return x + (col.width - measure(text, font, style.size)) / 2
    return x + style.padding


def _draw_row(
    flow: "PageFlow",
    columns: Sequence[Column],
    wrapped: list[list[str]],
    height: float,
    font: str,
    fill: str | None,
    style: TableStyle,
) -> None:
    top = flow.advance(height)
    x = flow.geometry.left
    first_baseline = top - style.padding - style.size * 0.8 - (style.leading - style.size) / 2
    for col, lines in zip(columns, wrapped):
        flow.place_rect(
            x,
            top - height,
            col.width,
            height,
            stroke=style.border_color,
            fill=fill,
            line_width=style.border_width,
        )
        for j, line in enumerate(lines):
            if line:
                flow.place_text(_cell_x(line, col, x, font, style), first_baseline - j * style.leading, line, font, style.size)
        x += col.width


def draw_table(
    flow: "PageFlow",
    columns: Sequence[Column],
    rows: Sequence[Sequence[str]],
    style: TableStyle | None = None,
) -> float:
    """Draw the table at the cursor and return the total height consumed."""
    style = style or TableStyle()

    def _wrap(cells: Sequence[str], font: str) -> list[list[str]]:
        padded = list(cells) + [""] * (len(columns) - len(cells))
        return [cell_lines(c, col.width, font, style.size, style.padding) for c, col in zip(padded, columns)]

    header_cells = _wrap([c.header for c in columns], style.bold_font)
    header_h = row_height(max(len(c) for c in header_cells), style)

    total = 0.0

    def _header() -> float:
        _draw_row(flow, columns, header_cells, header_h, style.bold_font, style.header_fill, style)
        return header_h

    if style.show_header:
        flow.ensure_room(header_h)
        total += _header()

    for i, cells in enumerate(rows):
        shaded = i in style.shaded_rows
        font = style.bold_font if shaded else style.font
        wrapped = _wrap(cells, font)
        h = row_height(max(len(c) for c in wrapped), style)

        if flow.ensure_room(h) and style.show_header and style.repeat_header:
            total += _header()

        if shaded:
            fill = style.header_fill
        elif style.stripe_fill and i % 2 == 1:
            fill = style.stripe_fill
        else:
            fill = None
        _draw_row(flow, columns, wrapped, h, font, fill, style)
        total += h

    return total
