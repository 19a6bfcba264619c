"""Portfolio calculation engine: pure functions, no I/O."""

from invertrack.engine.aggregator import capital_distribution, summarize_portfolio
from invertrack.engine.projector import (
    daily_rate,
    is_payday,
    project_capital,
    project_portfolio,
)

__all__ = [
    "capital_distribution",
    "daily_rate",
    "is_payday",
    "project_capital",
    "project_portfolio",
    "summarize_portfolio",
]
