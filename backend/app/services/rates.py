from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import InvalidTermError, RateScheduleError
from app.models.interest_rate import InterestRate
from app.schemas.quotation import ProductType

SUPPORTED_TERMS = (1, 3, 5)
DEFAULT_STEP = Decimal("0.10")

_PRESET = {
    1: ("9.75",),
    3: ("11.75", "11.85", "11.95"),
    5: ("13.10", "13.20", "13.30", "13.40", "13.50"),
}

DEFAULT_RATES: dict[tuple[ProductType, int], tuple[Decimal, ...]] = {
    (product, term): tuple(Decimal(r) for r in rates)
    for product in ProductType
    for term, rates in _PRESET.items()
}


def _to_dec(v) -> Decimal:
    return v if isinstance(v, Decimal) else Decimal(str(v))


@dataclass(frozen=True)
class RateSchedule:
    rates: tuple[Decimal, ...]
    step_increment: Decimal = DEFAULT_STEP

    def __post_init__(self):
        if not self.rates:
            raise RateScheduleError("rate_schedule_empty")
        for r in self.rates:
            if not r.is_finite() or r < 0:
                raise RateScheduleError(f"rate_negative_or_not_finite: {r}")

    @classmethod
    def explicit(cls, rates: Sequence, step_increment=DEFAULT_STEP) -> "RateSchedule":
        return cls(tuple(_to_dec(r) for r in rates), _to_dec(step_increment))

    @classmethod
    def stepped(cls, base_rate, step_increment, years: int) -> "RateSchedule":
        base = _to_dec(base_rate)
        step = _to_dec(step_increment)
        return cls(tuple(base + i * step for i in range(years)), step)

    def rate_for_year(self, year: int) -> Decimal:
        """Rate for a 1-based year; years past the end extend from the last rate."""
        if year <= len(self.rates):
            return self.rates[year - 1]
        return self.rates[-1] + (year - len(self.rates)) * self.step_increment

    def __len__(self) -> int:
        return len(self.rates)


def resolve(
    product_type: ProductType,
    term: int,
    overrides: Mapping[int, Sequence] | None = None,
    *,
    mode: str = "explicit",
    base_rate=None,
    step_increment=DEFAULT_STEP,
    explicit: Sequence | None = None,
) -> RateSchedule:
    if term not in SUPPORTED_TERMS:
        raise InvalidTermError(f"term_invalid: {term}")

    defaults = DEFAULT_RATES[(ProductType(product_type), term)]

    if mode == "step":
        base = base_rate if base_rate is not None else defaults[0]
        return RateSchedule.stepped(base, step_increment, term)
    if mode != "explicit":
        raise RateScheduleError(f"rate_mode_invalid: {mode}")

    if explicit:
        return RateSchedule.explicit(explicit, step_increment)

    configured = (overrides or {}).get(term)
    if configured:
        return RateSchedule.explicit(configured, step_increment)

    return RateSchedule(defaults, _to_dec(step_increment))


def resolve_for_quotation(quotation, overrides: Mapping[int, Sequence] | None = None) -> RateSchedule:
    return resolve(
        quotation.product_type,
        quotation.term,
        overrides,
        mode=quotation.rate_mode,
        base_rate=quotation.base_rate,
        step_increment=quotation.step_increment,
        explicit=quotation.rate_schedule,
    )


def load_rate_overrides(s: Session) -> dict[int, list[Decimal]]:
    rows = (
        s.execute(select(InterestRate).order_by(InterestRate.term.asc(), InterestRate.sequence.asc()))
        .scalars()
        .all()
    )
    out: dict[int, list[Decimal]] = {}
    for r in rows:
        out.setdefault(int(r.term), []).append(_to_dec(r.annual_rate_percent))
    return out
