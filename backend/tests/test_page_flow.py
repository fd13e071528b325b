import math

import pytest

from app.pdf.document import Document, ImageBox, Line, TextRun
from app.pdf.flow import PageFlow, PageGeometry
from app.pdf.table import Column, TableStyle
from app.pdf.text import measure

GEOMETRY = PageGeometry(top=700, bottom=100, left=50, right=50)


def _chrome(flow, page):
    flow.place_text(50, 60, f"footer {page.number}", "Helvetica", 8)


@pytest.mark.parametrize("n_rows", [1, 29, 30, 31, 60, 75, 90])
def test_rows_fill_pages_exactly(n_rows):
    # row height 20 on a usable height of 600 => 30 rows per page
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    style = TableStyle(size=9, leading=12, padding=4, show_header=False)
    flow.draw_table([Column(200)], [[f"row {i}"] for i in range(n_rows)], style)

    assert doc.page_count == math.ceil(n_rows * 20 / GEOMETRY.usable_height)


def test_units_never_cross_bottom_margin():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    flow.new_page()
    for _ in range(100):
        top = flow.advance(17)
        assert top - 17 >= GEOMETRY.bottom
    assert doc.page_count == math.ceil(100 / math.floor(600 / 17))


def test_chrome_drawn_on_every_flowed_page():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY, chrome=_chrome)
    for i in range(120):
        flow.draw_text(f"line {i}", "Helvetica", 10, leading=14)

    assert doc.page_count > 1
    for page in doc.pages:
        assert f"footer {page.number}" in page.text()


def test_new_page_without_chrome():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY, chrome=_chrome)
    cover = flow.new_page(chrome=False)
    assert "footer" not in cover.text()
    flow.new_page()
    assert "footer 2" in doc.pages[1].text()


def test_new_page_resets_cursor():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    flow.draw_text("hello", "Helvetica", 10)
    assert flow.y < GEOMETRY.top
    flow.new_page()
    assert flow.y == GEOMETRY.top
    assert flow.page_number == 2


def test_space_is_dropped_at_top_of_page():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    flow.new_page()
    flow.space(40)
    assert flow.y == GEOMETRY.top
    flow.draw_text("x", "Helvetica", 10, leading=10)
    flow.space(40)
    assert flow.y == GEOMETRY.top - 50


def test_oversized_unit_placed_at_top_without_looping():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    flow.new_page()
    assert flow.ensure_room(900) is False
    flow.advance(900)
    assert doc.page_count == 1


def test_text_baseline_and_alignment():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    run = flow.draw_text("Right", "Helvetica", 10, align="right")
    assert isinstance(run, TextRun)
    assert run.y == GEOMETRY.top - 10
    assert run.x + measure("Right", "Helvetica", 10) == pytest.approx(GEOMETRY.width - GEOMETRY.right)


def test_paragraph_lines_are_separate_units():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    text = " ".join(["word"] * 2000)
    n = flow.draw_paragraph(text, "Helvetica", 10, 14)
    assert n > 42
    assert doc.page_count == math.ceil(n / math.floor(600 / 14))


def test_images_break_pages_whole():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    for _ in range(5):
        flow.draw_image("logo.png", 120, 250, align="center")

    # two 250pt images fit in 600pt, the third starts a new page
    assert doc.page_count == 3
    for page in doc.pages:
        boxes = [i for i in page.items if isinstance(i, ImageBox)]
        assert 1 <= len(boxes) <= 2
        for box in boxes:
            assert box.y >= GEOMETRY.bottom
            assert box.y + box.height <= GEOMETRY.top
            assert box.x == pytest.approx((GEOMETRY.width - 120) / 2)


def test_rule_spans_content_width():
    doc = Document()
    flow = PageFlow(doc, GEOMETRY)
    flow.draw_rule(gap=10)

    lines = [i for i in doc.pages[0].items if isinstance(i, Line)]
    assert len(lines) == 1
    assert lines[0].x1 == GEOMETRY.left
    assert lines[0].x2 == GEOMETRY.width - GEOMETRY.right
    assert lines[0].y1 == GEOMETRY.top - 5
    assert flow.y == GEOMETRY.top - 10
