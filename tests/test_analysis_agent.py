"""Tests for the PortfolioAnalysisAgent (fake model, no API calls)."""

import asyncio
import pytest

from invertrack.agents import (
    ANALYSIS_ERROR_MESSAGE,
    NO_ANALYSIS_MESSAGE,
    PortfolioAnalysisAgent,
)
from invertrack.engine import summarize_portfolio
from invertrack.models.portfolio import Account


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Mimics genai.GenerativeModel.generate_content_async."""

    def __init__(self, text="1. Diversify.\n2. Good yield.\n3. Rebalance.", error=None):
        self.prompts = []
        self._text = text
        self._error = error

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self._error is not None:
            raise self._error
        return FakeResponse(self._text)


@pytest.fixture
def accounts():
    return [
        Account(name="Open Bank", amount=2230450.09, annual_yield=11.76),
        Account(name="", amount=160.16, annual_yield=0.0),
    ]


def analyze(agent, accounts):
    return asyncio.run(agent.analyze(accounts, summarize_portfolio(accounts)))


class TestBuildPrompt:
    """Tests for the prompt contents."""

    def test_lists_accounts_and_figures(self, accounts):
        agent = PortfolioAnalysisAgent(model=FakeModel(), response_language="Spanish")
        summary = summarize_portfolio(accounts)
        prompt = agent.build_prompt(accounts, summary)

        assert "- Open Bank: $2,230,450.09 at 11.76% per year" in prompt
        assert "- Unnamed account: $160.16 at 0.0% per year" in prompt
        assert f"Weighted average yield: {summary.weighted_average_yield:.2f}%" in prompt
        assert "Total: $2,230,610.25" in prompt
        assert "Answer in Spanish" in prompt

    def test_uses_currency_symbol(self, accounts):
        agent = PortfolioAnalysisAgent(model=FakeModel(), currency_symbol="€")
        prompt = agent.build_prompt(accounts, summarize_portfolio(accounts))
        assert "€2,230,450.09" in prompt


class TestAnalyze:
    """Tests for the analysis call."""

    def test_returns_model_text(self, accounts):
        model = FakeModel(text="  Three points.  ")
        agent = PortfolioAnalysisAgent(model=model, model_name="fake-model")
        result = analyze(agent, accounts)
        assert result.success is True
        assert result.text == "Three points."
        assert result.model_name == "fake-model"
        assert len(model.prompts) == 1

    def test_empty_text_uses_fallback(self, accounts):
        agent = PortfolioAnalysisAgent(model=FakeModel(text=""))
        result = analyze(agent, accounts)
        assert result.text == NO_ANALYSIS_MESSAGE

    def test_error_uses_error_message(self, accounts):
        agent = PortfolioAnalysisAgent(model=FakeModel(error=RuntimeError("quota exceeded")))
        result = analyze(agent, accounts)
        assert result.success is False
        assert result.text == ANALYSIS_ERROR_MESSAGE

    def test_no_retry_on_error(self, accounts):
        model = FakeModel(error=ConnectionError("offline"))
        analyze(PortfolioAnalysisAgent(model=model), accounts)
        assert len(model.prompts) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
