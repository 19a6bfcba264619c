"""Tests for the aggregator and the daily projector."""

import math
import pytest
from datetime import date, timedelta

from invertrack.engine.aggregator import capital_distribution, summarize_portfolio
from invertrack.engine.projector import (
    daily_rate,
    is_payday,
    project_capital,
    project_portfolio,
)
from invertrack.models.portfolio import Account, ExtraIncome, PortfolioState


def make_accounts(*pairs):
    return [
        Account(name=f"Account {i}", amount=amount, annual_yield=annual_yield)
        for i, (amount, annual_yield) in enumerate(pairs)
    ]


class TestSummarizePortfolio:
    """Tests for summarize_portfolio."""

    def test_empty_portfolio(self):
        summary = summarize_portfolio([])
        assert summary.total_amount == 0
        assert summary.weighted_average_yield == 0
        assert summary.monthly_income == 0

    def test_total_is_order_independent(self):
        accounts = make_accounts((100.5, 1), (200.25, 2), (0.25, 3))
        forward = summarize_portfolio(accounts)
        backward = summarize_portfolio(list(reversed(accounts)))
        assert forward.total_amount == pytest.approx(301.0)
        assert backward.total_amount == pytest.approx(forward.total_amount)

    def test_weighted_average_yield(self):
        summary = summarize_portfolio(make_accounts((1000, 10), (3000, 2)))
        # (1000*10 + 3000*2) / 4000
        assert summary.weighted_average_yield == pytest.approx(4.0)

    def test_yield_is_zero_when_total_is_zero(self):
        summary = summarize_portfolio(make_accounts((0, 12), (0, 9)))
        assert summary.weighted_average_yield == 0

    def test_yield_is_zero_when_total_is_negative(self):
        summary = summarize_portfolio(make_accounts((-500, 12), (100, 9)))
        assert summary.total_amount == pytest.approx(-400)
        assert summary.weighted_average_yield == 0

    def test_yield_within_individual_bounds(self):
        yields = [0.0, 9.08, 9.16, 11.76]
        summary = summarize_portfolio(
            make_accounts((160.16, 0.0), (247800.13, 9.08), (249820.13, 9.16), (2230450.09, 11.76))
        )
        assert min(yields) <= summary.weighted_average_yield <= max(yields)

    def test_monthly_income(self):
        summary = summarize_portfolio(make_accounts((120000, 10)))
        assert summary.monthly_income == pytest.approx(1000.0)


class TestCapitalDistribution:
    """Tests for capital_distribution."""

    def test_only_positive_accounts(self):
        accounts = make_accounts((300, 0), (0, 5), (-50, 0), (100, 1))
        slices = capital_distribution(accounts)
        assert [s.amount for s in slices] == [300, 100]
        assert [s.share_percent for s in slices] == pytest.approx([75.0, 25.0])

    def test_empty_when_nothing_positive(self):
        assert capital_distribution(make_accounts((0, 1), (-10, 2))) == []

    def test_unnamed_account_label(self):
        slices = capital_distribution([Account(name="  ", amount=10)])
        assert slices[0].name == "Unnamed account"


class TestDailyRate:
    """Tests for daily_rate."""

    def test_zero_and_missing_yield(self):
        assert daily_rate(0) == 0.0
        assert daily_rate(None) == 0.0

    def test_compounds_back_to_annual_yield(self):
        rate = daily_rate(12)
        assert rate == pytest.approx(0.0003105, abs=1e-7)
        assert (1 + rate) ** 365 == pytest.approx(1.12)

    def test_is_not_simple_division(self):
        assert daily_rate(12) < 0.12 / 365

    def test_minus_hundred_loses_everything(self):
        assert daily_rate(-100) == -1

    def test_below_minus_hundred_is_nan(self):
        assert math.isnan(daily_rate(-150))


class TestIsPayday:
    """Tests for is_payday."""

    @pytest.mark.parametrize("day", [
        date(2025, 1, 15),
        date(2025, 1, 31),
        date(2025, 4, 30),
        date(2024, 2, 29),
        date(2023, 2, 28),
    ])
    def test_paydays(self, day):
        assert is_payday(day)

    @pytest.mark.parametrize("day", [
        date(2025, 1, 14),
        date(2025, 1, 30),
        date(2024, 2, 28),
        date(2025, 4, 1),
    ])
    def test_other_days(self, day):
        assert not is_payday(day)


class TestProjectCapital:
    """Tests for project_capital."""

    START = date(2024, 12, 31)

    @pytest.mark.parametrize("horizon", [7, 15, 30, 90, 180, 365])
    def test_length_and_indices(self, horizon):
        ledger = project_capital(1000, 5, horizon, start_date=self.START)
        assert len(ledger) == horizon
        assert [row.day for row in ledger] == list(range(1, horizon + 1))

    def test_dates_follow_start_date(self):
        ledger = project_capital(1000, 5, 3, start_date=self.START)
        assert [row.date for row in ledger] == [
            date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3),
        ]

    def test_zero_horizon_is_empty(self):
        assert project_capital(1000, 5, 0, start_date=self.START) == []

    def test_negative_horizon_is_empty(self):
        assert project_capital(1000, 5, -3, start_date=self.START) == []

    def test_defaults_to_today(self):
        ledger = project_capital(1000, 5, 1)
        assert ledger[0].date == date.today() + timedelta(days=1)

    def test_one_year_at_twelve_percent(self):
        ledger = project_capital(1000, 12, 365, start_date=self.START)
        assert ledger[-1].total == pytest.approx(1120.0)

    def test_zero_yield_earns_nothing(self):
        ledger = project_capital(
            500, 0, 60, salary_per_period=100, start_date=self.START
        )
        assert all(row.earned == 0 for row in ledger)
        for previous, row in zip(ledger, ledger[1:]):
            if row.income == 0:
                assert row.total == previous.total

    def test_zero_capital_is_flat(self):
        ledger = project_capital(0, 12, 30, start_date=self.START)
        assert all(row.total == 0 for row in ledger)

    def test_pure_compounding_without_injections(self):
        rate = daily_rate(9.5)
        ledger = project_capital(25000, 9.5, 90, start_date=self.START)
        assert ledger[0].total == pytest.approx(25000 * (1 + rate))
        for previous, row in zip(ledger, ledger[1:]):
            assert row.total == pytest.approx(previous.total * (1 + rate))
            assert row.events == []
            assert row.income == 0

    def test_salary_on_fifteenth_and_month_end(self):
        ledger = project_capital(
            0, 0, 31, salary_per_period=1000, start_date=self.START
        )
        paid = [row.day for row in ledger if row.income]
        assert paid == [15, 31]
        assert ledger[-1].total == 2000
        assert ledger[14].events == ["Salary (semi-monthly): $1,000.00"]

    def test_salary_on_short_month_end(self):
        ledger = project_capital(
            0, 0, 29, salary_per_period=10, start_date=date(2024, 1, 31)
        )
        paid = [row.date for row in ledger if row.income]
        assert paid == [date(2024, 2, 15), date(2024, 2, 29)]

    def test_zero_salary_adds_no_event(self):
        ledger = project_capital(0, 0, 31, salary_per_period=0, start_date=self.START)
        assert all(row.events == [] for row in ledger)

    def test_extra_income_on_exact_date(self):
        bonus = ExtraIncome(
            description="Bonus", amount=500, date=self.START + timedelta(days=5)
        )
        ledger = project_capital(
            0, 0, 10, extra_incomes=[bonus], start_date=self.START
        )
        assert ledger[4].day == 5
        assert ledger[4].income == 500
        assert any("Bonus" in event for event in ledger[4].events)
        assert [row.day for row in ledger if row.income] == [5]

    def test_extra_incomes_same_day_keep_order(self):
        on = self.START + timedelta(days=2)
        incomes = [
            ExtraIncome(description="Second hand sale", amount=50, date=on),
            ExtraIncome(description="", amount=25, date=on),
        ]
        ledger = project_capital(0, 0, 3, extra_incomes=incomes, start_date=self.START)
        assert ledger[1].events == ["Second hand sale: $50.00", "Extra income: $25.00"]
        assert ledger[1].income == 75

    def test_income_earns_interest_same_day(self):
        rate = daily_rate(10)
        bonus = ExtraIncome(description="Bonus", amount=1000, date=self.START + timedelta(days=1))
        ledger = project_capital(0, 10, 1, extra_incomes=[bonus], start_date=self.START)
        assert ledger[0].earned == pytest.approx(1000 * rate)
        assert ledger[0].total == pytest.approx(1000 * (1 + rate))

    def test_negative_capital_propagates(self):
        ledger = project_capital(-1000, 12, 365, start_date=self.START)
        assert ledger[-1].total == pytest.approx(-1120.0)

    def test_recomputed_from_scratch(self):
        first = project_capital(1000, 7, 30, salary_per_period=5, start_date=self.START)
        second = project_capital(1000, 7, 30, salary_per_period=5, start_date=self.START)
        assert first == second


class TestProjectPortfolio:
    """Tests for project_portfolio."""

    def test_uses_summary_and_injections(self):
        start = date(2024, 12, 31)
        state = PortfolioState(
            accounts=make_accounts((1000, 10), (3000, 2)),
            salary=100,
            extra_incomes=[ExtraIncome(description="Gift", amount=40, date=date(2025, 1, 1))],
        )
        ledger = project_portfolio(state, 15, start_date=start)
        rate = daily_rate(4.0)
        assert ledger[0].income == 40
        assert ledger[0].total == pytest.approx((4000 + 40) * (1 + rate))
        assert ledger[14].income == 100

    def test_yield_below_minus_hundred_still_projects(self):
        state = PortfolioState(accounts=[Account(amount=100, annual_yield=-200)])
        ledger = project_portfolio(state, 7, start_date=date(2025, 1, 1))
        assert [row.day for row in ledger] == list(range(1, 8))
        assert all(math.isnan(row.total) for row in ledger)

    def test_capital_with_impossible_yield_gives_full_ledger(self):
        ledger = project_capital(1000, -150, 3, start_date=date(2025, 1, 1))
        assert len(ledger) == 3
        assert math.isnan(ledger[0].earned)
        assert ledger[-1].date == date(2025, 1, 4)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
