"""
Tests for the financial calculation engine.
"""

import pytest
from datetime import date

from app.calculations.mortgage import (
    analyse_overpayment,
    calculate_mortgage_payment,
    calculate_overpayment_impact,
    calculate_total_interest,
    generate_yearly_schedule,
)
from app.calculations.pension import (
    calculate_annual_retirement_income,
    calculate_compound_interest,
    calculate_pension_projection,
    project_retirement,
)
from app.calculations.budget import calculate_budget_progress, round_half_up
from app.calculations.formatting import format_currency, format_percentage


class TestMortgagePayment:
    """Test monthly mortgage payment calculation."""

    def test_standard_mortgage(self):
        """£200,000 at 3.5% over 25 years."""
        payment = calculate_mortgage_payment(200000, 3.5, 25)
        assert abs(payment - 1001.25) < 0.1

    def test_zero_interest_rate(self):
        """Zero rate divides the loan evenly across payments."""
        payment = calculate_mortgage_payment(200000, 0, 25)
        assert abs(payment - 666.67) < 0.1

    def test_short_term(self):
        """£50,000 at 3.5% over 1 year."""
        payment = calculate_mortgage_payment(50000, 3.5, 1)
        assert abs(payment - 4246.08) < 0.5

    def test_short_term_fully_amortizes(self):
        """Twelve payments should clear a one-year loan."""
        payment = calculate_mortgage_payment(50000, 3.5, 1)
        balance = 50000.0
        for _ in range(12):
            balance = balance * (1 + 0.035 / 12) - payment
        assert abs(balance) < 0.01

    def test_payment_not_rounded(self):
        """Payments are returned at full precision."""
        payment = calculate_mortgage_payment(200000, 0, 25)
        assert payment == 200000 / 300


class TestTotalInterest:
    """Test total interest calculation."""

    def test_total_interest(self):
        """£200,000 repaid at £1,006 a month for 25 years."""
        total_interest = calculate_total_interest(200000, 1006, 25)
        assert abs(total_interest - 101800) < 100

    def test_zero_interest_loan(self):
        payment = calculate_mortgage_payment(120000, 0, 10)
        assert calculate_total_interest(120000, payment, 10) == pytest.approx(0)


class TestOverpaymentImpact:
    """Test mortgage overpayment simulation."""

    def test_monthly_overpayment(self):
        """£100 a month extra on £200,000 at 3.5% with 20 years left."""
        impact = calculate_overpayment_impact(200000, 3.5, 20, 100, 0)
        assert 24 <= impact.months_saved <= 27
        assert 9000 <= impact.interest_saved <= 10000

    def test_annual_lump_sum(self):
        """An annual lump sum shortens the term and saves interest."""
        impact = calculate_overpayment_impact(200000, 3.5, 20, 0, 1000)
        assert impact.months_saved > 0
        assert impact.interest_saved > 0

    def test_lump_sum_is_spread_monthly(self):
        """A £1,200 lump sum behaves like £100 extra each month."""
        lump = calculate_overpayment_impact(200000, 3.5, 20, 0, 1200)
        monthly = calculate_overpayment_impact(200000, 3.5, 20, 100, 0)
        assert lump.months_saved == monthly.months_saved
        assert lump.interest_saved == pytest.approx(monthly.interest_saved)

    def test_no_overpayment(self):
        """Without extra payments nothing is saved."""
        impact = calculate_overpayment_impact(200000, 3.5, 20, 0, 0)
        assert impact.months_saved == 0
        assert impact.interest_saved >= 0
        assert impact.interest_saved < 0.01

    @pytest.mark.parametrize(
        "loan,rate,years,monthly,lump",
        [
            (150000, 4.5, 25, 50, 0),
            (300000, 2.0, 30, 0, 5000),
            (80000, 6.0, 10, 250, 1000),
            (100000, 0, 15, 100, 0),
        ],
    )
    def test_savings_never_negative(self, loan, rate, years, monthly, lump):
        impact = calculate_overpayment_impact(loan, rate, years, monthly, lump)
        assert impact.months_saved >= 0
        assert impact.interest_saved >= 0

    def test_simulation_bounded_by_term(self):
        """Negative extra payments cannot extend the term."""
        impact = calculate_overpayment_impact(200000, 3.5, 20, -500, 0)
        assert impact.months_saved == 0
        assert impact.interest_saved == 0

    @pytest.mark.parametrize(
        "loan,rate,years",
        [(200000, 3.5, 20), (300000, 2.0, 30), (150000, 4.5, 25)],
    )
    def test_saving_without_overpayment_not_negative(self, loan, rate, years):
        impact = calculate_overpayment_impact(loan, rate, years, 0, 0)
        assert impact.interest_saved >= 0

    def test_large_overpayment(self):
        """Paying the whole balance in month one saves almost the full term."""
        impact = calculate_overpayment_impact(10000, 5, 10, 20000, 0)
        assert impact.months_saved == 119


class TestOverpaymentAnalysis:
    """Test detailed overpayment comparison."""

    def test_totals_and_dates(self):
        analysis = analyse_overpayment(
            200000, 3.5, 20, 100, start_date=date(2025, 1, 1)
        )
        assert analysis.months_saved == 26
        assert analysis.term_reduction_years == 2
        assert analysis.term_reduction_months == 2
        assert analysis.original_end_date == date(2045, 1, 1)
        assert analysis.new_end_date == date(2042, 11, 1)
        assert analysis.new_total_interest < analysis.original_total_interest
        assert analysis.new_total_payments == pytest.approx(
            200000 + analysis.new_total_interest
        )
        assert analysis.original_total_payments == pytest.approx(
            analysis.monthly_payment * 240
        )

    def test_defaults_to_today(self):
        analysis = analyse_overpayment(100000, 4, 10, 0)
        assert analysis.original_end_date.year == date.today().year + 10


class TestYearlySchedule:
    """Test yearly amortization schedule."""

    def test_schedule_length(self):
        schedule = generate_yearly_schedule(200000, 3.5, 25)
        assert len(schedule) == 25
        assert [row.year for row in schedule] == list(range(1, 26))

    def test_schedule_pays_off_loan(self):
        schedule = generate_yearly_schedule(200000, 3.5, 25)
        assert schedule[-1].remaining_balance < 1
        assert sum(row.principal_paid for row in schedule) == pytest.approx(200000, abs=1)

    def test_interest_declines_over_time(self):
        schedule = generate_yearly_schedule(200000, 3.5, 25)
        assert schedule[0].interest_paid > schedule[-1].interest_paid

    def test_zero_rate_schedule(self):
        schedule = generate_yearly_schedule(200000, 0, 25)
        assert schedule[0].interest_paid == 0
        assert schedule[0].principal_paid == pytest.approx(8000)

    def test_balance_never_negative(self):
        """An oversized payment clears the balance without going below zero."""
        schedule = generate_yearly_schedule(10000, 5, 5, monthly_payment=5000)
        assert all(row.remaining_balance >= 0 for row in schedule)
        assert schedule[0].remaining_balance == 0

    def test_oversized_payment_repays_only_the_loan(self):
        """Principal stops accruing once the loan is cleared."""
        schedule = generate_yearly_schedule(10000, 5, 5, monthly_payment=5000)
        assert sum(row.principal_paid for row in schedule) == pytest.approx(10000)
        assert schedule[0].principal_paid == pytest.approx(10000)
        assert all(row.principal_paid == 0 for row in schedule[1:])
        assert all(row.interest_paid == 0 for row in schedule[1:])


class TestPensionProjection:
    """Test pension and compound interest projections."""

    def test_pension_projection(self):
        """£50,000 pot, £500 a month, 5% for 20 years."""
        projection = calculate_pension_projection(50000, 500, 5, 20)
        assert abs(projection - 339038) < 50

    def test_pension_compounds_principal_annually(self):
        projection = calculate_pension_projection(50000, 0, 5, 20)
        assert projection == pytest.approx(50000 * 1.05 ** 20)

    def test_compound_interest(self):
        """£10,000 plus £200 a month at 5% for 10 years."""
        future_value = calculate_compound_interest(10000, 200, 5, 10)
        assert abs(future_value - 47526.5) < 20

    def test_compound_interest_compounds_monthly(self):
        future_value = calculate_compound_interest(10000, 0, 5, 10)
        assert future_value == pytest.approx(10000 * (1 + 0.05 / 12) ** 120)

    def test_contribution_timing_conventions(self):
        """Pension contributions earn one extra month of growth."""
        pension = calculate_pension_projection(0, 300, 6, 15)
        savings = calculate_compound_interest(0, 300, 6, 15)
        assert pension == pytest.approx(savings * (1 + 0.06 / 12))

    def test_zero_rate_is_linear(self):
        assert calculate_pension_projection(1000, 100, 0, 10) == 13000
        assert calculate_compound_interest(1000, 100, 0, 10) == 13000


class TestRetirement:
    """Test retirement income and projection."""

    def test_retirement_income(self):
        assert calculate_annual_retirement_income(500000, 4) == 20000

    def test_default_withdrawal_rate(self):
        assert calculate_annual_retirement_income(500000) == 20000

    def test_custom_withdrawal_rate(self):
        assert calculate_annual_retirement_income(400000, 3.5) == pytest.approx(14000)

    def test_project_retirement(self):
        projection = project_retirement(
            current_age=35,
            retirement_age=67,
            current_pension=45000,
            annual_return=5,
            monthly_contribution=400,
            employer_contribution=200,
            desired_income=25000,
        )
        expected_pot = calculate_pension_projection(45000, 600, 5, 32)

        assert projection.years_to_retirement == 32
        assert projection.estimated_pension_pot == round(expected_pot)
        assert projection.estimated_annual_income == round(expected_pot * 0.04)
        assert projection.is_on_track == (expected_pot * 0.04 >= 25000)
        assert projection.pot_at_65 < projection.estimated_pension_pot < projection.pot_at_70
        assert projection.income_at_70 > projection.income_at_65

    def test_not_on_track(self):
        projection = project_retirement(
            current_age=55,
            retirement_age=60,
            current_pension=10000,
            annual_return=3,
            monthly_contribution=100,
            desired_income=30000,
        )
        assert projection.is_on_track is False

    def test_already_at_retirement_age(self):
        projection = project_retirement(
            current_age=67,
            retirement_age=67,
            current_pension=250000,
            annual_return=5,
            monthly_contribution=500,
        )
        assert projection.years_to_retirement == 0
        assert projection.estimated_pension_pot == 250000
        assert projection.pot_at_65 == 250000
        assert projection.estimated_annual_income == 10000


class TestBudgetProgress:
    """Test budget progress calculation."""

    def test_under_budget(self):
        result = calculate_budget_progress(800, 1000)
        assert result.percentage == 80
        assert result.is_over_budget is False

    def test_over_budget(self):
        result = calculate_budget_progress(1200, 1000)
        assert result.percentage == 120
        assert result.is_over_budget is True

    def test_zero_target(self):
        result = calculate_budget_progress(100, 0)
        assert result.percentage == 100
        assert result.is_over_budget is True

    def test_zero_target_nothing_spent(self):
        result = calculate_budget_progress(0, 0)
        assert result.percentage == 100
        assert result.is_over_budget is False

    def test_exactly_on_budget(self):
        result = calculate_budget_progress(1000, 1000)
        assert result.percentage == 100
        assert result.is_over_budget is False

    def test_rounds_to_whole_percent(self):
        assert calculate_budget_progress(1000, 1200).percentage == 83

    def test_halves_round_up(self):
        assert calculate_budget_progress(1, 8).percentage == 13

    def test_round_half_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(-12.5) == -12
        assert round_half_up(83.33) == 83


class TestFormatting:
    """Test currency and percentage formatting."""

    def test_format_currency(self):
        assert format_currency(1234.56) == "£1,234.56"
        assert format_currency(1000000) == "£1,000,000.00"
        assert format_currency(0) == "£0.00"

    def test_negative_values_drop_sign(self):
        assert format_currency(-99.99) == "£99.99"

    def test_custom_currency_symbol(self):
        assert format_currency(1234.56, "$") == "$1,234.56"
        assert format_currency(1234.56, "€") == "€1,234.56"

    def test_format_percentage(self):
        assert format_percentage(17.5924) == "17.59%"


class TestPurity:
    """Repeated calls return identical results."""

    def test_repeated_calls(self):
        assert calculate_mortgage_payment(200000, 3.5, 25) == calculate_mortgage_payment(200000, 3.5, 25)
        assert calculate_overpayment_impact(200000, 3.5, 20, 100, 0) == calculate_overpayment_impact(
            200000, 3.5, 20, 100, 0
        )
        assert calculate_pension_projection(50000, 500, 5, 20) == calculate_pension_projection(50000, 500, 5, 20)
        assert calculate_budget_progress(800, 1000) == calculate_budget_progress(800, 1000)
        assert format_currency(1234.56) == format_currency(1234.56)
