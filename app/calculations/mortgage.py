"""
Mortgage Calculations

Monthly payment, total interest, overpayment impact and yearly
amortization schedules for a fixed-rate repayment mortgage.

Rates are passed as percentages (e.g., 3.5 for 3.5%) and terms in years.
Inputs are not validated: negative amounts or terms are out of contract.
"""

from typing import List, Optional
from datetime import date
from dataclasses import dataclass
from dateutil.relativedelta import relativedelta


@dataclass
class OverpaymentResult:
    """Effect of regular overpayments on a mortgage."""

    months_saved: int
    interest_saved: float


@dataclass
class AmortizationYear:
    """One year of an amortization schedule."""

    year: int
    principal_paid: float
    interest_paid: float
    remaining_balance: float


@dataclass
class OverpaymentAnalysis:
    """Side-by-side comparison of a mortgage with and without overpayments."""

    monthly_payment: float
    monthly_overpayment: float
    months_saved: int
    interest_saved: float
    term_reduction_years: int
    term_reduction_months: int
    original_total_payments: float
    new_total_payments: float
    original_total_interest: float
    new_total_interest: float
    original_end_date: date
    new_end_date: date


def _monthly_rate(annual_interest_rate: float) -> float:
    return annual_interest_rate / 100 / 12


def calculate_mortgage_payment(
    loan_amount: float, annual_interest_rate: float, loan_term_years: float
) -> float:
    """
    Calculate the fixed monthly payment on an amortizing loan.

    Args:
        loan_amount: Amount borrowed
        annual_interest_rate: Annual nominal rate as a percentage (e.g., 3.5)
        loan_term_years: Term in years

    Returns:
        Monthly payment, unrounded
    """
    monthly_rate = _monthly_rate(annual_interest_rate)
    number_of_payments = loan_term_years * 12

    if monthly_rate == 0:
        return loan_amount / number_of_payments

    growth = (1 + monthly_rate) ** number_of_payments
    return loan_amount * monthly_rate * growth / (growth - 1)


def calculate_total_interest(
    loan_amount: float, monthly_payment: float, loan_term_years: float
) -> float:
    """Total interest paid if every scheduled payment is made."""
    return monthly_payment * loan_term_years * 12 - loan_amount


def _simulate_with_overpayment(
    loan_amount: float,
    monthly_rate: float,
    monthly_payment: float,
    extra_payment: float,
    max_months: float,
):
    """Run the month-by-month simulation; returns (months, interest paid)."""
    balance = loan_amount
    months = 0
    interest_paid = 0.0

    while balance > 0 and months < max_months:
        interest = balance * monthly_rate
        interest_paid += interest
        balance -= monthly_payment - interest + extra_payment
        months += 1

    return months, interest_paid


def calculate_overpayment_impact(
    loan_amount: float,
    annual_interest_rate: float,
    remaining_term_years: float,
    monthly_overpayment: float,
    annual_lump_sum: float,
) -> OverpaymentResult:
    """
    Estimate months and interest saved by overpaying a mortgage.

    The annual lump sum is spread evenly across the year and added to the
    monthly overpayment, rather than being applied once per year. Interest
    saved is never negative.

    Args:
        loan_amount: Outstanding balance
        annual_interest_rate: Annual rate as a percentage
        remaining_term_years: Years left on the mortgage
        monthly_overpayment: Extra paid every month
        annual_lump_sum: Extra paid once a year

    Returns:
        OverpaymentResult with months_saved and interest_saved
    """
    monthly_payment = calculate_mortgage_payment(
        loan_amount, annual_interest_rate, remaining_term_years
    )
    original_interest = calculate_total_interest(
        loan_amount, monthly_payment, remaining_term_years
    )

    total_months = remaining_term_years * 12
    extra_payment = monthly_overpayment + annual_lump_sum / 12

    months, interest_paid = _simulate_with_overpayment(
        loan_amount,
        _monthly_rate(annual_interest_rate),
        monthly_payment,
        extra_payment,
        total_months,
    )

    # floored at zero; rounding error can leave a tiny negative saving
    return OverpaymentResult(
        months_saved=int(total_months - months),
        interest_saved=max(0.0, original_interest - interest_paid),
    )


def analyse_overpayment(
    loan_amount: float,
    annual_interest_rate: float,
    remaining_term_years: int,
    monthly_overpayment: float,
    annual_lump_sum: float = 0.0,
    start_date: Optional[date] = None,
) -> OverpaymentAnalysis:
    """
    Detailed overpayment comparison with totals and projected end dates.

    Args:
        loan_amount: Outstanding balance
        annual_interest_rate: Annual rate as a percentage
        remaining_term_years: Whole years left on the mortgage
        monthly_overpayment: Extra paid every month
        annual_lump_sum: Extra paid once a year
        start_date: Date the comparison runs from (defaults to today)

    Returns:
        OverpaymentAnalysis
    """
    if start_date is None:
        start_date = date.today()

    monthly_payment = calculate_mortgage_payment(
        loan_amount, annual_interest_rate, remaining_term_years
    )
    original_total_payments = monthly_payment * remaining_term_years * 12
    original_total_interest = original_total_payments - loan_amount

    impact = calculate_overpayment_impact(
        loan_amount,
        annual_interest_rate,
        remaining_term_years,
        monthly_overpayment,
        annual_lump_sum,
    )
    new_total_interest = original_total_interest - impact.interest_saved
    remaining_months = remaining_term_years * 12 - impact.months_saved

    return OverpaymentAnalysis(
        monthly_payment=monthly_payment,
        monthly_overpayment=monthly_overpayment,
        months_saved=impact.months_saved,
        interest_saved=impact.interest_saved,
        term_reduction_years=impact.months_saved // 12,
        term_reduction_months=impact.months_saved % 12,
        original_total_payments=original_total_payments,
        new_total_payments=loan_amount + new_total_interest,
        original_total_interest=original_total_interest,
        new_total_interest=new_total_interest,
        original_end_date=start_date + relativedelta(years=remaining_term_years),
        new_end_date=start_date + relativedelta(months=remaining_months),
    )


def generate_yearly_schedule(
    loan_amount: float,
    annual_interest_rate: float,
    loan_term_years: int,
    monthly_payment: Optional[float] = None,
) -> List[AmortizationYear]:
    """
    Generate a year-by-year amortization schedule.

    Args:
        loan_amount: Amount borrowed
        annual_interest_rate: Annual rate as a percentage
        loan_term_years: Term in whole years
        monthly_payment: Payment to apply (defaults to the amortizing payment)

    Returns:
        One AmortizationYear per year of the term
    """
    if monthly_payment is None:
        monthly_payment = calculate_mortgage_payment(
            loan_amount, annual_interest_rate, loan_term_years
        )

    monthly_rate = _monthly_rate(annual_interest_rate)
    balance = loan_amount
    schedule = []

    for year in range(1, loan_term_years + 1):
        year_principal = 0.0
        year_interest = 0.0

        for _ in range(12):
            if balance <= 0:
                break

            interest = balance * monthly_rate
            principal = min(monthly_payment - interest, balance)

            year_principal += principal
            year_interest += interest
            balance -= principal

        schedule.append(
            AmortizationYear(
                year=year,
                principal_paid=year_principal,
                interest_paid=year_interest,
                remaining_balance=balance,
            )
        )

    return schedule
