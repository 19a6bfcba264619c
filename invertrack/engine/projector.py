"""
Daily Capital Projector

Produces the day-by-day ledger of the portfolio's capital over a horizon.

For every day of the horizon, in order:
1. Salary lands on pay days (the 15th and the last day of the month)
2. Extra incomes dated that day land, in insertion order
3. Interest is earned on the capital including that day's income
4. One ProjectionDay row is emitted with the running total

The annual yield is converted to a daily compounding rate so that 365
daily steps reproduce the nominal annual yield exactly. The year is
always 365 days long, leap years included.

The whole ledger is recomputed from scratch on every call.
"""

from calendar import monthrange
from datetime import date, timedelta
from typing import Iterable, Optional

from invertrack.engine.aggregator import summarize_portfolio
from invertrack.formatting import DEFAULT_CURRENCY_SYMBOL, format_currency
from invertrack.models.portfolio import ExtraIncome, PortfolioState, ProjectionDay

DAYS_PER_YEAR = 365
MID_MONTH_PAY_DAY = 15

SALARY_EVENT_LABEL = "Salary (semi-monthly)"
EXTRA_INCOME_DEFAULT_LABEL = "Extra income"


def daily_rate(annual_yield_percent: Optional[float]) -> float:
    """
    Convert a nominal annual yield (percent) into a daily compounding rate.

    Below -100% there is no real daily rate and the result is NaN, which
    then propagates through the ledger.

    >>> round(daily_rate(12), 7)
    0.0003105
    """
    if not annual_yield_percent:
        return 0.0
    base = 1 + annual_yield_percent / 100
    if base < 0:
        return float("nan")
    return base ** (1 / DAYS_PER_YEAR) - 1


def is_payday(day: date) -> bool:
    """True on the 15th and on the last day of the month."""
    last_day = monthrange(day.year, day.month)[1]
    return day.day == MID_MONTH_PAY_DAY or day.day == last_day


def project_capital(
    starting_capital: float,
    annual_yield_percent: Optional[float],
    horizon_days: int,
    salary_per_period: float = 0.0,
    extra_incomes: Iterable[ExtraIncome] = (),
    start_date: Optional[date] = None,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> list[ProjectionDay]:
    """
    Project the capital day by day.

    Args:
        starting_capital: Capital before day 1
        annual_yield_percent: Nominal annual yield, e.g. 11.5
        horizon_days: Number of days to project; 0 or less gives no rows
        salary_per_period: Amount paid on every pay day (0 to disable)
        extra_incomes: One-off incomes, matched by exact date
        start_date: Day 0 of the projection, defaults to today.
            Day i of the ledger is start_date + i days.
        currency_symbol: Symbol used in the event labels

    Returns:
        Exactly max(horizon_days, 0) rows, with day indices 1..horizon_days
    """
    start_date = start_date or date.today()
    rate = daily_rate(annual_yield_percent)
    incomes = list(extra_incomes)

    ledger: list[ProjectionDay] = []
    capital = starting_capital

    for i in range(1, horizon_days + 1):
        current = start_date + timedelta(days=i)
        income_today = 0.0
        events: list[str] = []

        if salary_per_period and is_payday(current):
            income_today += salary_per_period
            events.append(
                f"{SALARY_EVENT_LABEL}: "
                f"{format_currency(salary_per_period, currency_symbol)}"
            )

        for income in incomes:
            if income.date != current:
                continue
            income_today += income.amount
            label = income.description.strip() or EXTRA_INCOME_DEFAULT_LABEL
            events.append(f"{label}: {format_currency(income.amount, currency_symbol)}")

        # Injected funds earn interest from the day they land
        capital += income_today
        earned = capital * rate
        capital += earned

        ledger.append(
            ProjectionDay(
                day=i,
                date=current,
                earned=earned,
                income=income_today,
                events=events,
                total=capital,
            )
        )

    return ledger


def project_portfolio(
    state: PortfolioState,
    horizon_days: int,
    start_date: Optional[date] = None,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> list[ProjectionDay]:
    """
    Project a whole portfolio: its total capital compounds at the
    weighted-average yield, with the salary and extra incomes injected.
    """
    summary = summarize_portfolio(state.accounts)
    return project_capital(
        starting_capital=summary.total_amount,
        annual_yield_percent=summary.weighted_average_yield,
        horizon_days=horizon_days,
        salary_per_period=state.salary,
        extra_incomes=state.extra_incomes,
        start_date=start_date,
        currency_symbol=currency_symbol,
    )
