from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.formatting import parse_rate_list
from app.utils.timezone import today_local


class ProductType(str, Enum):
    CAPITAL_APPRECIATOR = "capital_appreciator"
    INCOME_PROVIDER = "income_provider"


RateMode = Literal["explicit", "step"]
AllocationFrequency = Literal["MONTHLY", "QUARTERLY", "ANNUALLY"]

ALLOCATIONS_PER_YEAR: dict[str, int] = {"MONTHLY": 12, "QUARTERLY": 4, "ANNUALLY": 1}


def add_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # 29 February rolls back to the 28th in non-leap years
        return d.replace(year=d.year + years, day=28)


class PreparedBy(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    cell: str = ""
    office: str = ""
    email: str = ""


class Quotation(BaseModel):
    """Validated quotation as handed over by the API layer."""

    model_config = ConfigDict(frozen=True)

    product_type: ProductType = ProductType.CAPITAL_APPRECIATOR
    term: int
    principal: Decimal = Field(gt=0)
    booster_percent: Decimal = Field(default=Decimal("0"), ge=0)

    rate_mode: RateMode = "explicit"
    rate_schedule: list[Decimal] | None = None
    base_rate: Decimal | None = None
    step_increment: Decimal = Decimal("0.10")

    income_allocation_frequency: AllocationFrequency = "MONTHLY"

    calculation_date: date = Field(default_factory=today_local)
    commencement_date: date = Field(default_factory=today_local)

    client_id: int | None = None
    client_number: str = ""
    client_name: str
    client_address: str = ""
    client_phone: str = ""
    client_email: str = ""

    prepared_by: PreparedBy = Field(default_factory=PreparedBy)

    @field_validator("rate_schedule", mode="before")
    @classmethod
    def rate_schedule_from_text(cls, v):
        if isinstance(v, str):
            return parse_rate_list(v)
        return v

    @field_validator("rate_schedule")
    @classmethod
    def rate_schedule_not_empty(cls, v: list[Decimal] | None):
        if v is not None and len(v) == 0:
            raise ValueError("rate_schedule must contain at least one rate")
        return v

    @field_validator("income_allocation_frequency", mode="before")
    @classmethod
    def frequency_upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("client_name")
    @classmethod
    def client_name_trim(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("client_name is required")
        return v

    @field_validator("client_address")
    @classmethod
    def address_trim(cls, v: str):
        return "\n".join(line.strip() for line in v.strip().splitlines())

    @property
    def redemption_date(self) -> date:
        return add_years(self.commencement_date, self.term)

    @property
    def address_lines(self) -> list[str]:
        return [line for line in self.client_address.splitlines() if line]

    @property
    def allocations_per_year(self) -> int:
        return ALLOCATIONS_PER_YEAR[self.income_allocation_frequency]
