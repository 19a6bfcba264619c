"""
Portfolio Tracker

This module ties together the engine, the repository and the AI agent,
and exposes the operations the presentation layer needs:
1. Editing accounts, extra incomes and the salary
2. Recomputing the summary, distribution and projection on demand
3. Requesting an AI analysis

DESIGN DECISION: Derived values are NOT cached. Each call recomputes
them from the current state, so there is no hidden dependency tracking.
Every mutation saves the whole state (last write wins).
"""

from datetime import date
from typing import Any, Optional

from pydantic import ValidationError

from invertrack.agents import PortfolioAnalysisAgent
from invertrack.engine import (
    capital_distribution,
    project_portfolio,
    summarize_portfolio,
)
from invertrack.formatting import DEFAULT_CURRENCY_SYMBOL
from invertrack.logger import get_logger
from invertrack.models.portfolio import (
    Account,
    AllocationSlice,
    ExtraIncome,
    PortfolioAnalysis,
    PortfolioState,
    PortfolioSummary,
    ProjectionDay,
    first_projection_day,
)
from invertrack.services.storage import (
    InMemoryPortfolioRepository,
    JsonFilePortfolioRepository,
    PortfolioRepository,
)

logger = get_logger(__name__)


class RecordNotFoundError(LookupError):
    """No account or extra income with the given id."""
    pass


def _updated_record(record, field: str, value: Any):
    """Return a re-validated copy of `record` with one field changed."""
    if field == "id" or field not in type(record).model_fields:
        raise ValueError(f"Field '{field}' cannot be edited")
    data = record.model_dump()
    data[field] = value
    try:
        return type(record).model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid value for '{field}': {value!r}") from e


def _changed_fields(record, values: dict[str, Any]) -> dict[str, Any]:
    return {field: value for field, value in values.items() if getattr(record, field, None) != value}


def _find(records, record_id: str, kind: str):
    for record in records:
        if record.id == record_id:
            return record
    raise RecordNotFoundError(f"{kind} not found: {record_id}")


class PortfolioTracker:
    """
    Editable portfolio plus its derived views.

    The state is loaded from the repository once, at construction.
    """

    def __init__(
        self,
        repository: PortfolioRepository,
        analysis_agent: Optional[PortfolioAnalysisAgent] = None,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ):
        self._repository = repository
        self._analysis_agent = analysis_agent
        self._currency_symbol = currency_symbol
        self._state = repository.load()
        self._analysis_in_flight = False
        self.last_analysis: Optional[PortfolioAnalysis] = None

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> PortfolioState:
        """A copy of the current state."""
        return self._state.model_copy(deep=True)

    @property
    def accounts(self) -> list[Account]:
        return list(self._state.accounts)

    @property
    def extra_incomes(self) -> list[ExtraIncome]:
        return list(self._state.extra_incomes)

    @property
    def salary(self) -> float:
        return self._state.salary

    @property
    def can_analyze(self) -> bool:
        return (
            self._analysis_agent is not None
            and bool(self._state.accounts)
            and not self._analysis_in_flight
        )

    def _persist(self) -> bool:
        saved = self._repository.save(self._state)
        if not saved:
            logger.warning("portfolio_not_persisted")
        return saved

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def add_account(self) -> Account:
        """Append an empty account (no name, amount 0, yield 0)."""
        account = Account()
        self._state.accounts.append(account)
        self._persist()
        logger.info("account_added", account_id=account.id)
        return account

    def update_account(self, account_id: str, field: str, value: Any) -> Account:
        """
        Change one field of an account.

        Raises:
            RecordNotFoundError: If no account has this id
            ValueError: If the field is unknown, immutable or the value invalid
        """
        for index, account in enumerate(self._state.accounts):
            if account.id == account_id:
                updated = _updated_record(account, field, value)
                self._state.accounts[index] = updated
                self._persist()
                return updated
        raise RecordNotFoundError(f"Account not found: {account_id}")

    def edit_account(self, account_id: str, values: dict[str, Any]) -> list[str]:
        """Apply the fields of `values` that differ from the account. Returns their names."""
        changed = _changed_fields(_find(self._state.accounts, account_id, "Account"), values)
        for field, value in changed.items():
            self.update_account(account_id, field, value)
        return list(changed)

    def remove_account(self, account_id: str) -> None:
        remaining = [a for a in self._state.accounts if a.id != account_id]
        if len(remaining) == len(self._state.accounts):
            raise RecordNotFoundError(f"Account not found: {account_id}")
        self._state.accounts = remaining
        self._persist()
        logger.info("account_removed", account_id=account_id)

    # -------------------------------------------------------------------------
    # Salary and extra incomes
    # -------------------------------------------------------------------------

    def set_salary(self, amount: float) -> None:
        """Set the amount paid on each pay day (0 disables the salary)."""
        self._state.salary = float(amount)
        self._persist()

    def add_extra_income(
        self,
        description: str = "",
        amount: float = 0.0,
        on: Optional[date] = None,
    ) -> ExtraIncome:
        """Append a one-off income, dated tomorrow unless `on` is given."""
        income = ExtraIncome(
            description=description,
            amount=amount,
            date=on or first_projection_day(),
        )
        self._state.extra_incomes.append(income)
        self._persist()
        logger.info("extra_income_added", income_id=income.id, date=income.date.isoformat())
        return income

    def update_extra_income(self, income_id: str, field: str, value: Any) -> ExtraIncome:
        """
        Change one field of an extra income.

        Raises:
            RecordNotFoundError: If no extra income has this id
            ValueError: If the field is unknown, immutable or the value invalid
        """
        for index, income in enumerate(self._state.extra_incomes):
            if income.id == income_id:
                updated = _updated_record(income, field, value)
                self._state.extra_incomes[index] = updated
                self._persist()
                return updated
        raise RecordNotFoundError(f"Extra income not found: {income_id}")

    def edit_extra_income(self, income_id: str, values: dict[str, Any]) -> list[str]:
        """
        Apply the fields of `values` that differ from the extra income.

        Each change goes through update_extra_income, so it is validated
        and saved the same way. Returns the names of the changed fields.
        """
        income = _find(self._state.extra_incomes, income_id, "Extra income")
        changed = _changed_fields(income, values)
        for field, value in changed.items():
            self.update_extra_income(income_id, field, value)
        return list(changed)

    def remove_extra_income(self, income_id: str) -> None:
        remaining = [i for i in self._state.extra_incomes if i.id != income_id]
        if len(remaining) == len(self._state.extra_incomes):
            raise RecordNotFoundError(f"Extra income not found: {income_id}")
        self._state.extra_incomes = remaining
        self._persist()
        logger.info("extra_income_removed", income_id=income_id)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def summary(self) -> PortfolioSummary:
        return summarize_portfolio(self._state.accounts)

    def distribution(self) -> list[AllocationSlice]:
        return capital_distribution(self._state.accounts)

    def projection(
        self,
        horizon_days: int,
        start_date: Optional[date] = None,
    ) -> list[ProjectionDay]:
        """Daily ledger of the whole portfolio over `horizon_days`."""
        return project_portfolio(
            self._state,
            horizon_days,
            start_date=start_date,
            currency_symbol=self._currency_symbol,
        )

    # -------------------------------------------------------------------------
    # AI analysis
    # -------------------------------------------------------------------------

    async def analyze(self) -> Optional[PortfolioAnalysis]:
        """
        Request an AI analysis of the current portfolio.

        Returns None without calling the agent when there is no agent,
        no account, or another analysis is still in flight.
        """
        if self._analysis_agent is None or not self._state.accounts:
            return None
        if self._analysis_in_flight:
            logger.info("analysis_suppressed", reason="in_flight")
            return None

        self._analysis_in_flight = True
        try:
            accounts = list(self._state.accounts)
            result = await self._analysis_agent.analyze(
                accounts, summarize_portfolio(accounts)
            )
        finally:
            self._analysis_in_flight = False

        self.last_analysis = result
        return result


def create_tracker(use_storage: bool = True) -> PortfolioTracker:
    """
    Factory function to create the tracker with its collaborators.

    Args:
        use_storage: Whether to persist to the local JSON store.
                    Set to False for an in-memory session.

    Falls back to in-memory storage when the store cannot be configured,
    and runs without AI analysis when Gemini is not configured.
    """
    from invertrack.config import get_settings

    settings = get_settings()

    try:
        currency_symbol = settings.app.currency_symbol
    except Exception as e:
        logger.warning("app_settings_invalid", error=str(e))
        currency_symbol = DEFAULT_CURRENCY_SYMBOL

    repository: PortfolioRepository
    if use_storage:
        try:
            repository = JsonFilePortfolioRepository()
        except Exception as e:
            logger.warning("storage_not_configured", error=str(e))
            repository = InMemoryPortfolioRepository()
    else:
        repository = InMemoryPortfolioRepository()

    try:
        agent = PortfolioAnalysisAgent(currency_symbol=currency_symbol)
    except Exception as e:
        logger.warning("analysis_agent_not_configured", error=str(e))
        agent = None

    return PortfolioTracker(
        repository=repository,
        analysis_agent=agent,
        currency_symbol=currency_symbol,
    )
