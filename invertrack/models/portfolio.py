"""
Core Data Models for InverTrack

These models define the schemas for all data flowing through the system.
They are designed to:
1. Provide clear field names and defaults for the editable records
2. Be serializable for local storage and logging
3. Keep stored state separate from derived state

DESIGN DECISION: Amounts and yields are plain floats and are NOT range
checked. Negative amounts (e.g. a debt) flow through the calculations
unchanged. Rounding only happens at display time.
"""

from datetime import date, datetime, timedelta
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

# Alias so that fields named `date` do not shadow the type in class bodies
CalendarDate = date


# Projection horizons offered to the user, in days
HORIZON_OPTIONS: tuple[int, ...] = (7, 15, 30, 90, 180, 365)


def new_record_id() -> str:
    """Generate a unique id for an editable record."""
    return uuid4().hex


def first_projection_day() -> date:
    """Day 1 of a projection started today. Incomes dated earlier never land."""
    return date.today() + timedelta(days=1)


# =============================================================================
# STORED RECORDS
# =============================================================================

class Account(BaseModel):
    """
    A named pool of capital earning a fixed nominal annual yield.

    A new account is an empty template (no name, amount 0, yield 0)
    that the user fills in field by field.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique account identifier"
    )
    name: str = Field(
        default="",
        description="Account or institution name"
    )
    amount: float = Field(
        default=0.0,
        description="Current capital in the account"
    )
    annual_yield: float = Field(
        default=0.0,
        description="Nominal annual yield as a percentage, e.g. 11.5"
    )


class ExtraIncome(BaseModel):
    """A one-off income landing on a specific calendar date."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique income identifier"
    )
    description: str = Field(
        default="",
        description="What the income is for"
    )
    amount: float = Field(
        default=0.0,
        description="Amount received"
    )
    date: CalendarDate = Field(
        default_factory=first_projection_day,
        description="Day the income is received"
    )


class PortfolioState(BaseModel):
    """
    Everything the user edits, persisted as one unit.

    Last write wins: the whole state is saved after every change.
    """

    accounts: list[Account] = Field(default_factory=list)
    salary: float = Field(
        default=0.0,
        description="Amount paid on every pay day (15th and month end)"
    )
    extra_incomes: list[ExtraIncome] = Field(default_factory=list)


# =============================================================================
# DERIVED VALUES
# =============================================================================

class PortfolioSummary(BaseModel):
    """
    Aggregate metrics over all accounts.

    Derived, never stored. See engine.aggregator.summarize_portfolio.
    """
    model_config = ConfigDict(frozen=True)

    total_amount: float = 0.0
    weighted_average_yield: float = 0.0
    monthly_income: float = 0.0


class AllocationSlice(BaseModel):
    """One account's share of the positive capital (distribution chart)."""
    model_config = ConfigDict(frozen=True)

    account_id: str
    name: str
    amount: float
    share_percent: float


class ProjectionDay(BaseModel):
    """
    One row of the daily projection ledger.

    `total` is the running capital after that day's injections and interest.
    """
    model_config = ConfigDict(frozen=True)

    day: int = Field(..., ge=1, description="1-based index within the horizon")
    date: CalendarDate
    earned: float = Field(..., description="Interest earned on this day")
    income: float = Field(
        default=0.0,
        description="Salary and extra incomes injected on this day"
    )
    events: list[str] = Field(default_factory=list)
    total: float

    @property
    def has_events(self) -> bool:
        return bool(self.events)


class PortfolioAnalysis(BaseModel):
    """Natural-language analysis returned by the AI collaborator."""

    text: str
    success: bool
    generated_at: datetime = Field(default_factory=datetime.now)
    model_name: Optional[str] = None


# =============================================================================
# SEED DATA
# =============================================================================

def default_portfolio_state() -> PortfolioState:
    """
    Sample portfolio used on first run or when stored data is unreadable.

    Returns a fresh object on every call.
    """
    return PortfolioState(
        accounts=[
            Account(id="1", name="Open Bank", amount=2230450.09, annual_yield=11.76),
            Account(id="2", name="Didi", amount=160.16, annual_yield=0.0),
            Account(id="3", name="Efectivo", amount=0.08, annual_yield=0.0),
            Account(id="4", name="ML (Mercado Libre)", amount=249820.13, annual_yield=9.16),
            Account(id="5", name="Nu", amount=247800.13, annual_yield=9.08),
        ],
        salary=0.0,
        extra_incomes=[],
    )
