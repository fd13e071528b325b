"""
Text measurement, greedy word wrap and full justification.

Widths come from ReportLab's Latin-1 metrics for the standard Type 1
fonts (or any font registered with pdfmetrics). Vertical spacing is not
handled here: callers drop their cursor by a fixed leading per line.
"""
from __future__ import annotations

from dataclasses import dataclass

from reportlab.pdfbase import pdfmetrics

from app.core.errors import AssetMissingError


def ensure_font(font: str) -> None:
    try:
        pdfmetrics.getFont(font)
    except KeyError:
        raise AssetMissingError(f"font:{font}")


def measure(text: str, font: str, size: float) -> float:
    return pdfmetrics.stringWidth(text, font, size)


def normalize(text: str) -> str:
    return " ".join((text or "").split())


def wrap(text: str, max_width: float, font: str, size: float) -> list[str]:
    """
    Greedy wrap: keep adding words while the joined line still fits.

    A word wider than max_width is never split; it ends up alone on its line.
    """
    normalized = normalize(text)
    if not normalized:
        return []

    lines: list[str] = []
    current: list[str] = []
    for word in normalized.split(" "):
        candidate = current + [word]
        if current and measure(" ".join(candidate), font, size) > max_width:
            lines.append(" ".join(current))
            current = [word]
        else:
            current = candidate
    if current:
        lines.append(" ".join(current))
    return lines


def justify(line: str, max_width: float, font: str, size: float) -> list[tuple[str, float]]:
    """
    Word start offsets that stretch the line to exactly max_width.

    Single-word lines keep their natural position.
    """
    words = normalize(line).split(" ") if normalize(line) else []
    if len(words) <= 1:
        return [(w, 0.0) for w in words]

    widths = [measure(w, font, size) for w in words]
    space = measure(" ", font, size)
    natural = sum(widths) + space * (len(words) - 1)
    extra = max(0.0, (max_width - natural) / (len(words) - 1))
    gap = space + extra

    out: list[tuple[str, float]] = []
    x = 0.0
    for w, width in zip(words, widths):
        out.append((w, x))
        x += width + gap
    return out


@dataclass(frozen=True)
class LaidLine:
    text: str
    width: float
    # word offsets for justified lines, None when the line is drawn as one run
    words: tuple[tuple[str, float], ...] | None = None

    @property
    def justified(self) -> bool:
        return self.words is not None


def layout_paragraph(
    text: str,
    max_width: float,
    font: str,
    size: float,
    justify_lines: bool = True,
) -> list[LaidLine]:
    lines = wrap(text, max_width, font, size)
    out: list[LaidLine] = []
    for i, line in enumerate(lines):
        last = i == len(lines) - 1
        if justify_lines and not last and " " in line:
            out.append(LaidLine(line, max_width, tuple(justify(line, max_width, font, size))))
        else:
            out.append(LaidLine(line, measure(line, font, size)))
    return out
