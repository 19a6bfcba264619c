"""
Portfolio Analysis Agent

Asks an LLM for a short natural-language analysis of the portfolio.

CRITICAL BOUNDARIES:
- CAN: Comment on diversification, performance and optimisation
- CANNOT: Change any stored data
- The response is treated as opaque text; no schema is enforced

The call is made once per user action: no retry, no timeout.
Any failure becomes a fixed fallback message for the user.
"""

from typing import Any, Iterable, Optional

import google.generativeai as genai

from invertrack.formatting import format_currency
from invertrack.logger import create_correlation_id, get_logger
from invertrack.models.portfolio import Account, PortfolioAnalysis, PortfolioSummary

NO_ANALYSIS_MESSAGE = "The analysis could not be generated."
ANALYSIS_ERROR_MESSAGE = (
    "There was an error connecting to the AI service. Please try again."
)


class PortfolioAnalysisAgent:
    """
    AI agent that summarizes a portfolio.

    RESPONSIBILITIES:
    - Build a prompt from the accounts and the portfolio summary
    - Call the Gemini model
    - Return its text, or a fallback message on failure
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        model_name: Optional[str] = None,
        response_language: str = "Spanish",
        currency_symbol: str = "$",
    ):
        """
        Initialize the agent.

        Args:
            model: A ready generative model (anything with an async
                   generate_content_async). If None, one is configured
                   from GeminiSettings.
            model_name: Reported on results when a model is injected
            response_language: Language the analysis is written in
            currency_symbol: Symbol used for amounts in the prompt
        """
        self._logger = get_logger(__name__)
        self._currency_symbol = currency_symbol
        if model is None:
            self._configure_genai()
        else:
            self._model = model
            self._model_name = model_name
            self._response_language = response_language

    def _configure_genai(self):
        """Configure Google Generative AI."""
        from invertrack.config import get_settings

        settings = get_settings().gemini
        genai.configure(api_key=settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=settings.model_name,
            generation_config={
                "temperature": settings.temperature,
                "max_output_tokens": settings.max_tokens,
            }
        )
        self._model_name = settings.model_name
        self._response_language = settings.response_language

    def build_prompt(
        self,
        accounts: Iterable[Account],
        summary: PortfolioSummary,
    ) -> str:
        """Build the analysis prompt from the accounts and summary."""
        account_lines = "\n".join(
            f"- {account.name or 'Unnamed account'}: "
            f"{format_currency(account.amount, self._currency_symbol)} "
            f"at {account.annual_yield}% per year"
            for account in accounts
        )

        return f"""Analyze the following investment portfolio:
{account_lines}

Overall figures:
Total: {format_currency(summary.total_amount, self._currency_symbol)}
Weighted average yield: {summary.weighted_average_yield:.2f}%
Estimated monthly income: {format_currency(summary.monthly_income, self._currency_symbol)}

Please give 3 key points about diversification, performance, and one
optimisation suggestion based on these figures. Answer in {self._response_language}.
Be concise and professional."""

    async def analyze(
        self,
        accounts: Iterable[Account],
        summary: PortfolioSummary,
    ) -> PortfolioAnalysis:
        """
        Generate a natural-language analysis of the portfolio.

        Never raises: failures are logged and returned as a
        PortfolioAnalysis with success=False and a fallback message.
        """
        accounts = list(accounts)
        log = self._logger.bind(
            correlation_id=str(create_correlation_id()),
            accounts=len(accounts),
        )
        prompt = self.build_prompt(accounts, summary)
        log.info("analysis_requested", model=self._model_name)

        try:
            response = await self._model.generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            log.error("analysis_failed", error=str(e), error_type=type(e).__name__)
            return PortfolioAnalysis(
                text=ANALYSIS_ERROR_MESSAGE,
                success=False,
                model_name=self._model_name,
            )

        if not text:
            log.warning("analysis_empty")
            return PortfolioAnalysis(
                text=NO_ANALYSIS_MESSAGE,
                success=True,
                model_name=self._model_name,
            )

        log.info("analysis_completed", length=len(text))
        return PortfolioAnalysis(text=text, success=True, model_name=self._model_name)
