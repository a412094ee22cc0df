"""
Pension and Savings Growth Calculations

Future value of a lump sum plus monthly contributions, and the income a
pension pot can support in retirement.

The pension projection and the compound interest calculation use different
conventions:

- calculate_pension_projection compounds the existing pot annually and treats
  contributions as paid at the start of each month (annuity-due).
- calculate_compound_interest compounds the principal monthly and treats
  contributions as paid at the end of each month (ordinary annuity).
"""

from dataclasses import dataclass

DEFAULT_WITHDRAWAL_RATE = 4.0
PROJECTION_AGES = (65, 70)


@dataclass
class RetirementProjection:
    """Projected pension pot and retirement income."""

    years_to_retirement: int
    estimated_pension_pot: int
    estimated_annual_income: int
    is_on_track: bool
    pot_at_65: int
    income_at_65: int
    pot_at_70: int
    income_at_70: int


def _future_value_of_contributions(
    monthly_contribution: float, monthly_rate: float, months: float
) -> float:
    """Ordinary annuity future value; linear unless the rate is positive."""
    if monthly_rate <= 0:
        return monthly_contribution * months
    return monthly_contribution * (((1 + monthly_rate) ** months - 1) / monthly_rate)


def calculate_pension_projection(
    current_value: float,
    monthly_contribution: float,
    annual_return_rate: float,
    years: float,
) -> float:
    """
    Project the value of a pension pot.

    Args:
        current_value: Current pot value
        monthly_contribution: Amount added each month
        annual_return_rate: Annual return as a percentage (e.g., 5)
        years: Years until retirement

    Returns:
        Projected pot value
    """
    monthly_rate = annual_return_rate / 100 / 12
    months = years * 12

    future_value_of_current = current_value * (1 + annual_return_rate / 100) ** years

    future_value_of_contributions = _future_value_of_contributions(
        monthly_contribution, monthly_rate, months
    )
    if monthly_rate > 0:
        future_value_of_contributions *= 1 + monthly_rate

    return future_value_of_current + future_value_of_contributions


def calculate_compound_interest(
    principal: float,
    monthly_contribution: float,
    annual_interest_rate: float,
    years: float,
) -> float:
    """
    Future value of savings with monthly compounding.

    Args:
        principal: Initial deposit
        monthly_contribution: Amount deposited each month
        annual_interest_rate: Annual rate as a percentage
        years: Investment horizon in years

    Returns:
        Future value
    """
    monthly_rate = annual_interest_rate / 100 / 12
    months = years * 12

    future_value_of_principal = principal * (1 + monthly_rate) ** months

    return future_value_of_principal + _future_value_of_contributions(
        monthly_contribution, monthly_rate, months
    )


def calculate_annual_retirement_income(
    pension_pot: float, withdrawal_rate: float = DEFAULT_WITHDRAWAL_RATE
) -> float:
    """Annual income drawn from a pot at the given withdrawal rate (percent)."""
    return pension_pot * (withdrawal_rate / 100)


def project_retirement(
    current_age: int,
    retirement_age: int,
    current_pension: float,
    annual_return: float,
    monthly_contribution: float,
    employer_contribution: float = 0.0,
    desired_income: float = 0.0,
    withdrawal_rate: float = DEFAULT_WITHDRAWAL_RATE,
) -> RetirementProjection:
    """
    Project a retirement plan and compare it with a desired income.

    Personal and employer contributions are combined. Ages at or below the
    current age project no growth and return the current pot.

    Args:
        current_age: Age today
        retirement_age: Planned retirement age
        current_pension: Current pot value
        annual_return: Annual return as a percentage
        monthly_contribution: Personal contribution per month
        employer_contribution: Employer contribution per month
        desired_income: Target annual retirement income
        withdrawal_rate: Annual withdrawal rate as a percentage

    Returns:
        RetirementProjection with values rounded to whole currency units
    """
    total_contribution = monthly_contribution + employer_contribution

    def pot_at(age: int) -> float:
        years = max(0, age - current_age)
        return calculate_pension_projection(
            current_pension, total_contribution, annual_return, years
        )

    pot = pot_at(retirement_age)
    income = calculate_annual_retirement_income(pot, withdrawal_rate)
    pot_65, pot_70 = (pot_at(age) for age in PROJECTION_AGES)

    return RetirementProjection(
        years_to_retirement=max(0, retirement_age - current_age),
        estimated_pension_pot=round(pot),
        estimated_annual_income=round(income),
        is_on_track=income >= desired_income,
        pot_at_65=round(pot_65),
        income_at_65=round(calculate_annual_retirement_income(pot_65, withdrawal_rate)),
        pot_at_70=round(pot_70),
        income_at_70=round(calculate_annual_retirement_income(pot_70, withdrawal_rate)),
    )
