from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.core.errors import InvalidInputError
from app.schemas.quotation import ALLOCATIONS_PER_YEAR, ProductType
from app.services.rates import RateSchedule

HUNDRED = Decimal("100")
TWELVE = Decimal("12")


def _to_dec(v) -> Decimal:
    return v if isinstance(v, Decimal) else Decimal(str(v))


@dataclass(frozen=True)
class ProjectionRow:
    year: int
    opening_capital: Decimal
    rate: Decimal
    income_amount: Decimal
    closing_capital: Decimal

    @property
    def monthly_income(self) -> Decimal:
        return self.income_amount / TWELVE

    @property
    def annualised(self) -> Decimal:
        return self.opening_capital + self.income_amount


@dataclass(frozen=True)
class Projection:
    product_type: ProductType
    principal: Decimal
    boosted_capital: Decimal
    rows: tuple[ProjectionRow, ...]
    maturity_value: Decimal

    @property
    def total_income(self) -> Decimal:
        return sum((r.income_amount for r in self.rows), Decimal("0"))

    @property
    def rates(self) -> list[Decimal]:
        return [r.rate for r in self.rows]

    def income_per_allocation(self, frequency: str, year: int = 1) -> Decimal:
        return self.rows[year - 1].income_amount / ALLOCATIONS_PER_YEAR[frequency]


def project(
    principal,
    booster_percent,
    schedule: RateSchedule,
    term: int,
    mode: ProductType,
) -> Projection:
    principal = _to_dec(principal)
    booster = _to_dec(booster_percent or 0)

    if not principal.is_finite() or principal <= 0:
        raise InvalidInputError(f"principal_must_be_positive: {principal}")
    if term <= 0:
        raise InvalidInputError(f"term_must_be_positive: {term}")
    if booster < 0:
        raise InvalidInputError(f"booster_must_not_be_negative: {booster}")

    mode = ProductType(mode)
    boosted = principal * (1 + booster / HUNDRED)

    rows: list[ProjectionRow] = []
    capital = boosted
    for year in range(1, term + 1):
        rate = schedule.rate_for_year(year)
        income = capital * (rate / HUNDRED)
        if mode == ProductType.CAPITAL_APPRECIATOR:
            closing = capital + income
        else:
            closing = capital
        rows.append(
            ProjectionRow(
                year=year,
                opening_capital=capital,
                rate=rate,
                income_amount=income,
                closing_capital=closing,
            )
        )
        capital = closing

    if mode == ProductType.CAPITAL_APPRECIATOR:
        maturity = rows[-1].closing_capital
    else:
        maturity = principal

    return Projection(
        product_type=mode,
        principal=principal,
        boosted_capital=boosted,
        rows=tuple(rows),
        maturity_value=maturity,
    )


def project_quotation(quotation, schedule: RateSchedule) -> Projection:
    return project(
        quotation.principal,
        quotation.booster_percent,
        schedule,
        quotation.term,
        quotation.product_type,
    )
