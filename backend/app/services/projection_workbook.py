from __future__ import annotations

from datetime import datetime

import xlsxwriter

from app.schemas.quotation import ProductType, Quotation
from app.services.projection import Projection
from app.utils.formatting import format_date


def build_projection_workbook(quotation: Quotation, projection: Projection, out_file):
    """Income projection table as a workbook. Money cells hold unrounded values."""
    wb = xlsxwriter.Workbook(out_file, {"in_memory": True})
    base_font = "Calibri"
    is_income = quotation.product_type == ProductType.INCOME_PROVIDER

    # ----------------------------
    # Formats
    # ----------------------------
    meta_label = wb.add_format({"bold": True, "font_name": base_font, "font_size": 11, "font_color": "#334155"})
    meta_value = wb.add_format({"font_name": base_font, "font_size": 11, "font_color": "#0f172a"})
    subtle = wb.add_format({"font_name": base_font, "font_size": 10, "font_color": "#64748b"})

    header = wb.add_format(
        {
            "bold": True,
            "font_name": base_font,
            "font_size": 11,
            "bg_color": "#F1F5F9",
            "border": 1,
            "align": "center",
            "valign": "vcenter",
        }
    )

    int0 = wb.add_format({"font_name": base_font, "font_size": 11, "num_format": "0", "border": 1, "align": "center"})
    money2 = wb.add_format(
        {"font_name": base_font, "font_size": 11, "num_format": "#,##0.00", "border": 1, "align": "right"}
    )
    rate2 = wb.add_format(
        {"font_name": base_font, "font_size": 11, "num_format": '0.00"%"', "border": 1, "align": "right"}
    )

    total_label = wb.add_format(
        {
            "bold": True,
            "font_name": base_font,
            "font_size": 11,
            "bg_color": "#F8FAFC",
            "border": 1,
            "align": "left",
        }
    )
    total_money2 = wb.add_format(
        {
            "bold": True,
            "font_name": base_font,
            "font_size": 11,
            "bg_color": "#F8FAFC",
            "border": 1,
            "num_format": "#,##0.00",
            "align": "right",
        }
    )
    total_blank = wb.add_format({"bg_color": "#F8FAFC", "border": 1})

    # ----------------------------
    # Sheet: Income Projections
    # ----------------------------
    ws = wb.add_worksheet("Income Projections")

    ws.set_column(0, 0, 8)  # Year
    ws.set_column(1, 1, 20)  # Capital value
    ws.set_column(2, 2, 18)  # Rate
    ws.set_column(3, 4, 20)  # Income columns

    ws.write(0, 0, "Client", meta_label)
    ws.write(0, 1, quotation.client_name, meta_value)

    ws.write(1, 0, "Product", meta_label)
    ws.write(1, 1, f"{quotation.product_type.value.replace('_', ' ').title()}, {quotation.term} year term", meta_value)

    ws.write(2, 0, "Exit", meta_label)
    ws.write(2, 1, format_date(quotation.redemption_date), subtle)

    ws.write(2, 3, "Generated", meta_label)
    ws.write(2, 4, datetime.now().strftime("%Y-%m-%d %H:%M"), subtle)

    last_header = "Monthly Income" if is_income else "Annualised"
    headers = ["Year", "Capital Value", "Dividend Forecast", "Projected Dividend", last_header]
    ws.set_row(3, 18)
    for c, h in enumerate(headers):
        ws.write(3, c, h, header)

    ws.freeze_panes(4, 1)

    r = 4
    for row in projection.rows:
        ws.write_number(r, 0, row.year, int0)
        ws.write_number(r, 1, float(row.opening_capital), money2)
        ws.write_number(r, 2, float(row.rate), rate2)
        ws.write_number(r, 3, float(row.income_amount), money2)
        last = row.monthly_income if is_income else row.annualised
        ws.write_number(r, 4, float(last), money2)
        r += 1

    last_excel = r  # Excel row number (1-based) for last data row

    ws.write(r, 0, "Total", total_label)
    ws.write(r, 1, "", total_blank)
    ws.write(r, 2, "", total_blank)
    ws.write_formula(r, 3, f"=SUM(D5:D{last_excel})", total_money2, float(projection.total_income))
    if is_income:
        ws.write(r, 4, "", total_blank)
    else:
        ws.write_number(r, 4, float(projection.maturity_value), total_money2)

    ws.set_landscape()
    ws.fit_to_pages(1, 0)

    wb.close()
