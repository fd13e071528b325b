"""
Quotation document composer.

Builds the proposal document for both products from one set of section
builders. The product type only decides which builders run and in what
order; everything below this module is product-agnostic.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from typing import Callable

from app.core.config import Settings, settings as default_settings
from app.core.errors import AssetMissingError
from app.pdf.document import Document, Page
from app.pdf.flow import PageFlow, PageGeometry
from app.pdf.table import Column, TableStyle
from app.pdf.text import ensure_font, measure, wrap
from app.schemas.quotation import ProductType, Quotation
from app.services import legal_text
from app.services.projection import Projection
from app.utils.formatting import format_date, format_money, format_percent, format_rate_list

logger = logging.getLogger(__name__)

FONT = "Helvetica"
BOLD = "Helvetica-Bold"

BODY_SIZE = 10
BODY_LEADING = 15
CLAUSE_SIZE = 9
CLAUSE_LEADING = 12
SMALL_SIZE = 8
HEADING_SIZE = 11
TITLE_SIZE = 14
VALUE_OFFSET = 220
LABEL_GAP = 10

GEOMETRY = PageGeometry(top=740, bottom=100, left=72, right=72)

PRODUCT_NAMES = {
    ProductType.CAPITAL_APPRECIATOR: "Capital Appreciator Fixed Deposit Note",
    ProductType.INCOME_PROVIDER: "Income Provider Fixed Deposit Note",
}

ALLOCATION_PHRASES = {
    "MONTHLY": "per month",
    "QUARTERLY": "per quarter",
    "ANNUALLY": "per year",
}

FEE_COLUMNS = [
    Column(200, "Description"),
    Column(130, "Frequency"),
    Column(121, "Percentage", "right"),
]

TABLE_STYLE = TableStyle(font=FONT, bold_font=BOLD, size=9, leading=11, padding=5, stripe_fill="#FBFDFF")


@dataclass
class _Context:
    flow: PageFlow
    quotation: Quotation
    projection: Projection
    settings: Settings
    logo: str | None

    def money(self, value) -> str:
        return format_money(value, self.settings.currency_symbol)

    @property
    def is_income(self) -> bool:
        return self.quotation.product_type == ProductType.INCOME_PROVIDER

    @property
    def years_label(self) -> str:
        return "Year" if self.quotation.term == 1 else "Years"


SectionFn = Callable[[_Context], None]


# ----------------------------
# Chrome
# ----------------------------

def _make_chrome(settings: Settings, logo: str | None):
    def chrome(flow: PageFlow, page: Page) -> None:
        if logo:
            flow.place_image(logo, page.width - 170 - 25, 780, 170, 50)
        lines = list(settings.footer_lines)
        for i, line in enumerate(lines):
            x = (page.width - measure(line, FONT, SMALL_SIZE)) / 2
            flow.place_text(x, 50 + (len(lines) - 1 - i) * 10, line, FONT, SMALL_SIZE)
        label = f"Page {page.number}"
        flow.place_text(page.width - flow.geometry.right - measure(label, FONT, SMALL_SIZE), 30, label, FONT, SMALL_SIZE)

    return chrome


# ----------------------------
# Shared pieces
# ----------------------------

def _heading(ctx: _Context, text: str) -> None:
    ctx.flow.space(14)
    ctx.flow.draw_text(text, BOLD, HEADING_SIZE, leading=18)


def _pairs(ctx: _Context, items: list[tuple[str, str | list[str]]]) -> None:
    label_width = VALUE_OFFSET - LABEL_GAP
    value_width = ctx.flow.geometry.content_width - VALUE_OFFSET
    for label, value in items:
        labels = wrap(label, label_width, FONT, BODY_SIZE)
        values = value if isinstance(value, list) else [value]
        lines: list[str] = []
        for v in values:
            lines.extend(wrap(v, value_width, FONT, BODY_SIZE))
        for i in range(max(len(labels), len(lines), 1)):
            left = labels[i] if i < len(labels) else ""
            right = lines[i] if i < len(lines) else ""
            ctx.flow.draw_columns([(0, left, FONT), (VALUE_OFFSET, right, FONT)], BODY_SIZE, leading=BODY_LEADING)


def _annualised_return(projection: Projection, term: int) -> Decimal:
    growth = projection.maturity_value / projection.principal
    return (growth ** (Decimal(1) / Decimal(term)) - 1) * 100


def _income_per_allocation(ctx: _Context) -> Decimal:
    return ctx.projection.income_per_allocation(ctx.quotation.income_allocation_frequency)


# ----------------------------
# Sections
# ----------------------------

def _cover(ctx: _Context) -> None:
    q = ctx.quotation
    flow = ctx.flow
    flow.new_page(chrome=False)

    if ctx.logo:
        flow.place_image(ctx.logo, 60, 650, 200, 58)

    title = "INCOME PROVIDER PROPOSAL" if ctx.is_income else "CAPITAL APPRECIATOR PROPOSAL"
    flow.place_text(60, 520, title, BOLD, 22)
    flow.place_text(60, 492, f"{PRODUCT_NAMES[q.product_type]}, {q.term} {ctx.years_label} Term", FONT, 14)
    flow.place_text(60, 440, f"Prepared for: {q.client_name}", BOLD, 12)
    flow.place_text(60, 420, f"Date: {format_date(q.calculation_date)}", FONT, 11)

    pb = q.prepared_by
    block = [
        ("Prepared by:", pb.name),
        ("Cell:", pb.cell),
        ("Office:", pb.office),
        ("Email:", pb.email),
    ]
    y = 200.0
    for label, value in block:
        if not value:
            continue
        flow.place_text(60, y, label, BOLD, 10)
        flow.place_text(140, y, value, FONT, 10)
        y -= 14


def _letter(ctx: _Context) -> None:
    q = ctx.quotation
    p = ctx.projection
    flow = ctx.flow
    flow.new_page()

    if ctx.is_income:
        phrase = ALLOCATION_PHRASES[q.income_allocation_frequency]
        title = (
            f"Earning {ctx.money(_income_per_allocation(ctx))} {phrase} on "
            f"{ctx.money(q.principal)} over {q.term} {ctx.years_label}"
        )
        intro = (
            f"We take pleasure in submitting the following proposal to you. It outlines a fixed-term investment "
            f"designed to pay a regular income, allocated {q.income_allocation_frequency.lower()}, from an initial "
            f"capital of {ctx.money(q.principal)} over a {q.term}-year horizon. Income is paid out and not "
            f"reinvested, and the capital of {ctx.money(p.maturity_value)} is returned at the exit date."
        )
    else:
        title = (
            f"Turning {ctx.money(q.principal)} into {ctx.money(p.maturity_value)} "
            f"in {q.term} {ctx.years_label}"
        )
        intro = (
            f"We take pleasure in submitting the following proposal to you. It outlines a fixed-term investment "
            f"designed to grow an initial capital of {ctx.money(q.principal)} to a projected "
            f"{ctx.money(p.maturity_value)} over a {q.term}-year horizon, with every year's return reinvested "
            f"at the rates set out in the income projections below."
        )

    flow.draw_paragraph(title, BOLD, TITLE_SIZE, 20, justify=False)
    flow.space(12)

    details: list[tuple[str, str | list[str]]] = [
        ("Date of offer:", format_date(q.calculation_date)),
        ("Offered to:", q.client_name),
    ]
    if q.client_number:
        details.append(("Client number:", q.client_number))
    details += [
        ("Address:", q.address_lines),
        ("Telephone:", q.client_phone),
        ("Email:", q.client_email),
    ]
    _pairs(ctx, details)

    flow.space(15)
    flow.draw_text(f"Dear {q.client_name}", FONT, BODY_SIZE, leading=BODY_LEADING)
    flow.space(5)
    flow.draw_paragraph(intro, FONT, BODY_SIZE, BODY_LEADING)


def _summary(ctx: _Context) -> None:
    q = ctx.quotation
    p = ctx.projection
    _heading(ctx, "INVESTMENT SUMMARY")

    items: list[tuple[str, str | list[str]]] = [
        ("Investment amount", ctx.money(q.principal)),
        ("Investment booster", format_percent(q.booster_percent)),
        ("Amount allocated with enhancement", ctx.money(p.boosted_capital)),
        ("Term in years", str(q.term)),
        ("Interest rates", format_rate_list(p.rates)),
        ("Commencement date", format_date(q.commencement_date)),
        ("Exit date", format_date(q.redemption_date)),
    ]
    if ctx.is_income:
        items += [
            ("Income allocation", q.income_allocation_frequency.title()),
            ("Income per allocation (year 1)", ctx.money(_income_per_allocation(ctx))),
            ("Total projected income", ctx.money(p.total_income)),
            ("Capital returned at exit", ctx.money(p.maturity_value)),
        ]
    else:
        items += [
            ("Return cycle", "Annually"),
            ("Projected maturity value", ctx.money(p.maturity_value)),
            ("Total projected return", ctx.money(p.maturity_value - p.principal)),
            ("Annualised return", format_percent(_annualised_return(p, q.term), 1)),
            ("Capital allocation", "100%"),
        ]
    items.append(("Liquidity", "None"))
    _pairs(ctx, items)


def _projection_table(ctx: _Context) -> None:
    p = ctx.projection
    _heading(ctx, "INCOME PROJECTIONS")

    last_header = "Monthly Income" if ctx.is_income else "Annualised"
    columns = [
        Column(50, "Year", "center"),
        Column(110, "Capital Value", "right"),
        Column(90, "Dividend Forecast", "center"),
        Column(100, "Projected Dividend", "right"),
        Column(101, last_header, "right"),
    ]

    rows: list[list[str]] = []
    for r in p.rows:
        last = r.monthly_income if ctx.is_income else r.annualised
        rows.append(
            [
                str(r.year),
                ctx.money(r.opening_capital),
                format_percent(r.rate),
                ctx.money(r.income_amount),
                ctx.money(last),
            ]
        )
    if ctx.is_income:
        rows.append(["Total", "", "", ctx.money(p.total_income), ""])
    else:
        rows.append(["Maturity", "", "", ctx.money(p.total_income), ctx.money(p.maturity_value)])

    style = replace(TABLE_STYLE, shaded_rows=frozenset({len(rows) - 1}))
    ctx.flow.draw_table(columns, rows, style)

    ctx.flow.space(6)
    if ctx.is_income:
        note = (
            f"* Income is paid {ctx.quotation.income_allocation_frequency.lower()} and is not reinvested; "
            f"the capital value remains flat for the full term."
        )
    else:
        note = "* Calculation assumes annual reinvestment of dividends."
    ctx.flow.draw_paragraph(note, FONT, SMALL_SIZE, 11, justify=False)


def _conditions(ctx: _Context) -> None:
    _heading(ctx, "CONDITIONS")
    clauses = (legal_text.INCOME_CONDITIONS if ctx.is_income else []) + legal_text.CONDITIONS
    for i, clause in enumerate(clauses, start=1):
        ctx.flow.draw_paragraph(f"{i}. {clause}", FONT, CLAUSE_SIZE, CLAUSE_LEADING)
        ctx.flow.space(4)

    _heading(ctx, "VALIDITY")
    ctx.flow.draw_paragraph(
        legal_text.VALIDITY.format(days=ctx.settings.offer_validity_days),
        FONT,
        CLAUSE_SIZE,
        CLAUSE_LEADING,
    )


def _fees(ctx: _Context) -> None:
    s = ctx.settings
    _heading(ctx, "PLACEMENT AND ADMIN FEES")
    ctx.flow.draw_table(
        FEE_COLUMNS,
        [
            ["Placement fee", "Once off", format_percent(s.placement_fee_percent)],
            ["Admin fee", "Once off", format_percent(s.admin_fee_percent)],
        ],
        TABLE_STYLE,
    )

    _heading(ctx, "COMMISSION")
    ctx.flow.draw_table(
        FEE_COLUMNS,
        [["Commission", "First year", format_percent(s.commission_percent)]],
        TABLE_STYLE,
    )


def _signature_line(ctx: _Context, left: str, right: str) -> None:
    flow = ctx.flow
    x = flow.geometry.left
    top = flow.advance(44)
    flow.place_line(x, top - 26, x + 180, top - 26)
    flow.place_line(x + 250, top - 26, x + 430, top - 26)
    flow.place_text(x, top - 38, left, FONT, 9)
    flow.place_text(x + 250, top - 38, right, FONT, 9)


def _signature(ctx: _Context) -> None:
    q = ctx.quotation
    flow = ctx.flow
    flow.new_page()

    flow.draw_text("CLIENT CONFIRMATION", BOLD, HEADING_SIZE, leading=18)
    flow.draw_paragraph(legal_text.CONFIRMATION, FONT, BODY_SIZE, BODY_LEADING)

    _heading(ctx, "AGREEMENT DETAILS")
    _pairs(
        ctx,
        [
            ("Agreement number:", q.client_number or "To be allocated"),
            ("Investor name:", q.client_name),
            ("Prepared by:", q.prepared_by.name or ctx.settings.company_name),
        ],
    )

    flow.space(20)
    _signature_line(ctx, "Client Signature", "Date")
    flow.space(10)
    _signature_line(ctx, "Witness Signature", "Date")

    _heading(ctx, "SUPPORT DOCUMENTATION")
    for name in legal_text.SUPPORT_DOCUMENTS:
        flow.draw_text(f"[ ] {name}", FONT, BODY_SIZE, leading=BODY_LEADING)

    flow.space(6)
    flow.draw_rule(gap=16)
    flow.draw_paragraph(legal_text.DISCLAIMER, FONT, SMALL_SIZE, 11)


SECTIONS: dict[ProductType, tuple[SectionFn, ...]] = {
    ProductType.CAPITAL_APPRECIATOR: (
        _cover,
        _letter,
        _summary,
        _projection_table,
        _conditions,
        _fees,
        _signature,
    ),
    ProductType.INCOME_PROVIDER: (
        _cover,
        _letter,
        _summary,
        _projection_table,
        _fees,
        _conditions,
        _signature,
    ),
}


def _resolve_logo(settings: Settings) -> str | None:
    if not settings.logo_path:
        return None
    path = Path(settings.logo_path)
    if not path.is_file():
        raise AssetMissingError(str(path))
    return str(path)


def compose_quotation(
    quotation: Quotation,
    projection: Projection,
    *,
    settings: Settings | None = None,
    geometry: PageGeometry | None = None,
) -> Document:
    settings = settings or default_settings
    for font in (FONT, BOLD):
        ensure_font(font)
    logo = _resolve_logo(settings)

    doc = Document(title=f"Quotation - {quotation.client_name}", author=settings.company_name)
    flow = PageFlow(doc, geometry or GEOMETRY, chrome=_make_chrome(settings, logo))
    ctx = _Context(flow=flow, quotation=quotation, projection=projection, settings=settings, logo=logo)

    for section in SECTIONS[quotation.product_type]:
        section(ctx)

    logger.debug(
        "composed %s quotation for %s: %d pages",
        quotation.product_type.value,
        quotation.client_name,
        doc.page_count,
    )
    return doc
