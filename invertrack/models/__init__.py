"""
Data Models Package

This package contains all Pydantic models used in InverTrack.
Stored records (accounts, incomes, salary) and derived values
(summary, projection rows) are kept in separate models.
"""

from invertrack.models.portfolio import (
    HORIZON_OPTIONS,
    Account,
    AllocationSlice,
    ExtraIncome,
    PortfolioAnalysis,
    PortfolioState,
    PortfolioSummary,
    ProjectionDay,
    default_portfolio_state,
    first_projection_day,
    new_record_id,
)

__all__ = [
    "HORIZON_OPTIONS",
    # Stored records
    "Account",
    "ExtraIncome",
    "PortfolioState",
    # Derived values
    "AllocationSlice",
    "PortfolioAnalysis",
    "PortfolioSummary",
    "ProjectionDay",
    # Helpers
    "default_portfolio_state",
    "first_projection_day",
    "new_record_id",
]
