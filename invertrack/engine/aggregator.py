"""
Portfolio Aggregator

Reduces the account list into a PortfolioSummary.

The weighted-average yield weights each account's yield by the capital
in it, which is more representative than a simple average: an account
holding most of the money dominates the portfolio's return.
"""

from typing import Iterable

from invertrack.models.portfolio import Account, AllocationSlice, PortfolioSummary

UNNAMED_ACCOUNT_LABEL = "Unnamed account"


def summarize_portfolio(accounts: Iterable[Account]) -> PortfolioSummary:
    """
    Compute total capital, weighted-average yield and monthly income.

    The weighted-average yield is exactly 0 when the total is not
    positive. Negative amounts are accepted as-is.
    """
    total_amount = 0.0
    weighted_sum = 0.0
    for account in accounts:
        total_amount += account.amount
        weighted_sum += account.amount * account.annual_yield

    weighted_average_yield = weighted_sum / total_amount if total_amount > 0 else 0.0

    # Simple (non-compounded) estimate from the current annual rate
    monthly_income = total_amount * (weighted_average_yield / 100) / 12

    return PortfolioSummary(
        total_amount=total_amount,
        weighted_average_yield=weighted_average_yield,
        monthly_income=monthly_income,
    )


def capital_distribution(accounts: Iterable[Account]) -> list[AllocationSlice]:
    """
    Share of the positive capital held by each account.

    Accounts with a zero or negative amount are left out, so the shares
    of the returned slices add up to 100.
    """
    positive = [account for account in accounts if account.amount > 0]
    total = sum(account.amount for account in positive)
    if total <= 0:
        return []

    return [
        AllocationSlice(
            account_id=account.id,
            name=account.name.strip() or UNNAMED_ACCOUNT_LABEL,
            amount=account.amount,
            share_percent=account.amount / total * 100,
        )
        for account in positive
    ]
