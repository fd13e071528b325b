from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.schemas.quotation import ProductType, Quotation, add_years


def _base(**kw):
    data = dict(term=3, principal="100000", client_name="Client")
    data.update(kw)
    return data


def test_defaults():
    q = Quotation(**_base())
    assert q.product_type == ProductType.CAPITAL_APPRECIATOR
    assert q.booster_percent == Decimal("0")
    assert q.rate_mode == "explicit"
    assert q.rate_schedule is None
    assert q.income_allocation_frequency == "MONTHLY"
    assert q.allocations_per_year == 12


def test_rate_schedule_accepts_legacy_text():
    q = Quotation(**_base(rate_schedule="11.75%, 11.85%, 11.95%"))
    assert q.rate_schedule == [Decimal("11.75"), Decimal("11.85"), Decimal("11.95")]


def test_bad_rate_text_is_rejected():
    with pytest.raises((ValidationError, ValueError)):
        Quotation(**_base(rate_schedule="eleven"))


def test_empty_rate_list_is_rejected():
    with pytest.raises(ValidationError):
        Quotation(**_base(rate_schedule=[]))


@pytest.mark.parametrize("principal", ["0", "-5"])
def test_principal_must_be_positive(principal):
    with pytest.raises(ValidationError):
        Quotation(**_base(principal=principal))


def test_client_name_required():
    with pytest.raises(ValidationError):
        Quotation(**_base(client_name="   "))


def test_allocation_frequency_normalised():
    q = Quotation(**_base(income_allocation_frequency=" quarterly "))
    assert q.income_allocation_frequency == "QUARTERLY"
    assert q.allocations_per_year == 4

    with pytest.raises(ValidationError):
        Quotation(**_base(income_allocation_frequency="WEEKLY"))


def test_address_lines_trimmed():
    q = Quotation(**_base(client_address="  1 Main Road \n\n  Cape Town  "))
    assert q.address_lines == ["1 Main Road", "Cape Town"]


def test_redemption_date():
    q = Quotation(**_base(commencement_date=date(2026, 3, 2)))
    assert q.redemption_date == date(2029, 3, 2)


def test_leap_day_rolls_back():
    assert add_years(date(2028, 2, 29), 1) == date(2029, 2, 28)
    assert add_years(date(2028, 2, 29), 4) == date(2032, 2, 29)


def test_quotation_is_frozen():
    q = Quotation(**_base())
    with pytest.raises(ValidationError):
        q.term = 5
