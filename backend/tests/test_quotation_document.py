from datetime import date
from decimal import Decimal

import pytest
from PIL import Image

from app.core.config import Settings
from app.core.errors import AssetMissingError
from app.pdf.document import Document, ImageBox, Line, render_pdf
from app.pdf.flow import PageFlow
from app.pdf.text import measure
from app.schemas.quotation import PreparedBy, ProductType, Quotation
from app.services import quotation_document
from app.services.projection import project_quotation
from app.services.quotation_document import compose_quotation
from app.services.rates import resolve_for_quotation


def _quotation(product_type: ProductType, term: int = 3, **kw) -> Quotation:
    data = dict(
        product_type=product_type,
        term=term,
        principal=Decimal("100000"),
        booster_percent=Decimal("5"),
        client_name="Jane Client",
        client_number="CP-0042",
        client_address="1 Main Road\nRondebosch\nCape Town",
        client_phone="021 555 0100",
        client_email="jane@example.com",
        calculation_date=date(2026, 3, 2),
        commencement_date=date(2026, 3, 2),
        prepared_by=PreparedBy(name="Sam Adviser", cell="082 555 0101", email="sam@example.com"),
    )
    data.update(kw)
    return Quotation(**data)


def _compose(q: Quotation, settings: Settings | None = None):
    settings = settings or Settings(logo_path=None)
    projection = project_quotation(q, resolve_for_quotation(q))
    return compose_quotation(q, projection, settings=settings), settings


def _first_index(doc, text: str) -> int:
    runs = [r.text for page in doc.pages for r in page.text_runs()]
    return runs.index(text)


def test_appreciator_document_content():
    doc, settings = _compose(_quotation(ProductType.CAPITAL_APPRECIATOR))
    text = " ".join(p.text() for p in doc.pages)

    assert doc.page_count >= 4
    assert "CAPITAL APPRECIATOR PROPOSAL" in doc.pages[0].text()
    assert "R105,000.00" in text
    assert "R117,337.50" in text
    assert "11.75%" in text
    assert "Annualised" in text
    assert "Monthly Income" not in text
    assert "* Calculation assumes annual reinvestment of dividends." in text


def test_income_provider_document_content():
    doc, _ = _compose(_quotation(ProductType.INCOME_PROVIDER))
    text = " ".join(p.text() for p in doc.pages)

    assert "INCOME PROVIDER PROPOSAL" in doc.pages[0].text()
    assert "Monthly Income" in text
    assert "R1,028.13" in text
    assert "Capital returned at exit" in text
    assert "R100,000.00" in text


def test_section_order_per_product():
    ca, _ = _compose(_quotation(ProductType.CAPITAL_APPRECIATOR))
    ip, _ = _compose(_quotation(ProductType.INCOME_PROVIDER))

    for doc in (ca, ip):
        assert _first_index(doc, "INVESTMENT SUMMARY") < _first_index(doc, "INCOME PROJECTIONS")
        assert _first_index(doc, "CLIENT CONFIRMATION") > _first_index(doc, "CONDITIONS")

    assert _first_index(ca, "CONDITIONS") < _first_index(ca, "PLACEMENT AND ADMIN FEES")
    assert _first_index(ip, "PLACEMENT AND ADMIN FEES") < _first_index(ip, "CONDITIONS")


def test_cover_has_no_chrome_and_other_pages_do():
    doc, settings = _compose(_quotation(ProductType.CAPITAL_APPRECIATOR, term=5))
    footer = settings.footer_lines[0]

    assert footer not in doc.pages[0].text()
    for page in doc.pages[1:]:
        assert footer in page.text()
        assert f"Page {page.number}" in page.text()


def test_signature_page_starts_fresh():
    doc, _ = _compose(_quotation(ProductType.INCOME_PROVIDER, term=1))
    last = doc.pages[-1]
    assert "CLIENT CONFIRMATION" in last.text()
    assert "Client Signature" in last.text()
    full_width = last.width - quotation_document.GEOMETRY.left - quotation_document.GEOMETRY.right
    rules = [i for i in last.items if isinstance(i, Line) and i.x2 - i.x1 == pytest.approx(full_width)]
    assert len(rules) == 1


def test_content_stays_inside_margins():
    doc, _ = _compose(_quotation(ProductType.CAPITAL_APPRECIATOR, term=5))
    bottom = quotation_document.GEOMETRY.bottom
    footer_runs = set(Settings(logo_path=None).footer_lines)
    for page in doc.pages[1:]:
        for run in page.text_runs():
            if run.text in footer_runs or run.text.startswith("Page "):
                continue
            assert run.y >= bottom


def test_logo_on_cover_and_pages(tmp_path):
    logo = tmp_path / "logo.png"
    Image.new("RGB", (40, 12), "navy").save(logo)

    doc, _ = _compose(_quotation(ProductType.CAPITAL_APPRECIATOR), Settings(logo_path=str(logo)))

    cover = [i for i in doc.pages[0].items if isinstance(i, ImageBox)]
    assert [(i.x, i.y, i.width, i.height) for i in cover] == [(60, 650, 200, 58)]

    second = [i for i in doc.pages[1].items if isinstance(i, ImageBox)]
    assert len(second) == 1
    assert second[0].x == pytest.approx(doc.pages[1].width - 195)

    assert render_pdf(doc).startswith(b"%PDF")


def test_missing_logo_is_reported(tmp_path):
    q = _quotation(ProductType.CAPITAL_APPRECIATOR)
    with pytest.raises(AssetMissingError) as exc:
        _compose(q, Settings(logo_path=str(tmp_path / "absent.png")))
    assert exc.value.asset.endswith("absent.png")


def test_missing_font_is_reported(monkeypatch):
    monkeypatch.setattr(quotation_document, "BOLD", "Missing-Bold")
    with pytest.raises(AssetMissingError):
        _compose(_quotation(ProductType.CAPITAL_APPRECIATOR))


def test_renders_pdf_bytes():
    doc, _ = _compose(_quotation(ProductType.INCOME_PROVIDER, term=5, income_allocation_frequency="quarterly"))
    data = render_pdf(doc)
    assert data.startswith(b"%PDF")
    assert data.rstrip().endswith(b"%%EOF")


def test_long_pair_labels_wrap_before_value_column():
    q = _quotation(ProductType.CAPITAL_APPRECIATOR)
    projection = project_quotation(q, resolve_for_quotation(q))
    doc = Document()
    flow = PageFlow(doc, quotation_document.GEOMETRY)
    ctx = quotation_document._Context(flow, q, projection, Settings(logo_path=None), None)

    label = "Amount allocated with enhancement once the booster percentage has been applied"
    quotation_document._pairs(ctx, [(label, "R105,000.00")])

    left = quotation_document.GEOMETRY.left
    value_x = left + quotation_document.VALUE_OFFSET
    runs = doc.pages[0].text_runs()
    label_runs = [r for r in runs if r.x == left]

    assert len(label_runs) > 1
    assert " ".join(r.text for r in label_runs) == label
    for r in label_runs:
        assert r.x + measure(r.text, r.font, r.size) < value_x
    assert [r.text for r in runs if r.x == value_x] == ["R105,000.00"]
