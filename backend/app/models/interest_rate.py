from sqlalchemy import Integer, DateTime, func, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base


class InterestRate(Base):
    __tablename__ = "interest_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    term: Mapped[int] = mapped_column(Integer, index=True)
    # 1-based year of the term this rate applies to
    sequence: Mapped[int] = mapped_column(Integer)
    annual_rate_percent: Mapped[float] = mapped_column(Numeric(8, 4))
    updated_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    updated_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("term", "sequence", name="uq_interest_rates_term_sequence"),
    )
