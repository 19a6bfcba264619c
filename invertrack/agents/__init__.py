"""AI Agents package."""

from invertrack.agents.analysis_agent import (
    ANALYSIS_ERROR_MESSAGE,
    NO_ANALYSIS_MESSAGE,
    PortfolioAnalysisAgent,
)

__all__ = [
    "ANALYSIS_ERROR_MESSAGE",
    "NO_ANALYSIS_MESSAGE",
    "PortfolioAnalysisAgent",
]
