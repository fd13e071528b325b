"""Display formatting for quotation figures. Rounding happens here and nowhere earlier."""
from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from app.core.errors import RateScheduleError

Q2 = Decimal("0.01")

_RATE_SPLIT = re.compile(r"[,;\n]+")


def d2(x: Decimal) -> Decimal:
    return x.quantize(Q2, rounding=ROUND_HALF_UP)


def _to_dec(v) -> Decimal:
    return v if isinstance(v, Decimal) else Decimal(str(v))


def format_money(value, symbol: str = "R") -> str:
    amount = d2(_to_dec(value))
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percent(value, precision: int = 2) -> str:
    return f"{_to_dec(value):.{precision}f}%"


def format_date(d: date | None) -> str:
    if d is None:
        return ""
    return d.strftime("%d-%b-%y")


def parse_rate_list(text: str) -> list[Decimal]:
    """Parse the legacy "11.75%, 11.85%, 11.95%" form into an ordered list."""
    out: list[Decimal] = []
    for part in _RATE_SPLIT.split(text or ""):
        p = part.strip().rstrip("%").strip()
        if not p:
            continue
        try:
            v = Decimal(p)
        except InvalidOperation:
            raise RateScheduleError(f"rate_not_numeric: {part.strip()!r}")
        if not v.is_finite():
            raise RateScheduleError(f"rate_not_numeric: {part.strip()!r}")
        out.append(v)
    if not out:
        raise RateScheduleError("rate_schedule_empty")
    return out


def format_rate_list(rates) -> str:
    return ", ".join(format_percent(r) for r in rates)
