"""
Financial calculator API endpoints.

These endpoints accept calculator inputs and return calculated results.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from app.calculations import budget, formatting, mortgage, pension, salary
from app.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the application was built with."""
    return request.app.state.settings


def _out_of_range(exc: Exception) -> HTTPException:
    logger.warning(f"Calculation failed: {exc}")
    return HTTPException(status_code=400, detail="Calculation inputs are out of range")


# === Mortgage ===

class MortgageInput(BaseModel):
    """Input for a mortgage payment calculation."""

    loan_amount: float = Field(gt=0)
    annual_interest_rate: float = Field(ge=0)
    term_years: float = Field(gt=0)


class MortgageResponse(BaseModel):
    """Monthly payment and lifetime cost of a mortgage."""

    monthly_payment: float
    total_payments: float
    total_interest: float
    formatted_monthly_payment: str


@router.post("/mortgage", response_model=MortgageResponse)
async def calculate_mortgage(
    inputs: MortgageInput,
    settings: Settings = Depends(get_app_settings),
):
    """Calculate the monthly payment and total interest on a mortgage."""
    try:
        payment = mortgage.calculate_mortgage_payment(
            inputs.loan_amount, inputs.annual_interest_rate, inputs.term_years
        )
    except OverflowError as e:
        raise _out_of_range(e)

    total_interest = mortgage.calculate_total_interest(
        inputs.loan_amount, payment, inputs.term_years
    )

    return MortgageResponse(
        monthly_payment=payment,
        total_payments=inputs.loan_amount + total_interest,
        total_interest=total_interest,
        formatted_monthly_payment=formatting.format_currency(
            payment, settings.currency_symbol
        ),
    )


class OverpaymentInput(BaseModel):
    """Input for an overpayment comparison."""

    loan_amount: float = Field(gt=0)
    annual_interest_rate: float = Field(ge=0)
    remaining_term_years: int = Field(gt=0, le=100)
    monthly_overpayment: float = Field(default=0.0, ge=0)
    annual_lump_sum: float = Field(default=0.0, ge=0)
    start_date: Optional[date] = None


class OverpaymentResponse(BaseModel):
    """Mortgage totals with and without overpayments."""

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


@router.post("/mortgage/overpayment", response_model=OverpaymentResponse)
async def calculate_overpayment(inputs: OverpaymentInput):
    """Compare a mortgage with and without overpayments."""
    try:
        analysis = mortgage.analyse_overpayment(
            loan_amount=inputs.loan_amount,
            annual_interest_rate=inputs.annual_interest_rate,
            remaining_term_years=inputs.remaining_term_years,
            monthly_overpayment=inputs.monthly_overpayment,
            annual_lump_sum=inputs.annual_lump_sum,
            start_date=inputs.start_date,
        )
    except OverflowError as e:
        raise _out_of_range(e)

    return OverpaymentResponse(**asdict(analysis))


class AmortizationInput(BaseModel):
    """Input for a yearly amortization schedule."""

    loan_amount: float = Field(gt=0)
    annual_interest_rate: float = Field(ge=0)
    term_years: int = Field(gt=0, le=100)
    monthly_payment: Optional[float] = Field(default=None, gt=0)


class AmortizationYearResponse(BaseModel):
    year: int
    principal_paid: float
    interest_paid: float
    remaining_balance: float


class AmortizationResponse(BaseModel):
    schedule: List[AmortizationYearResponse]
    total_interest: float
    total_principal: float


@router.post("/mortgage/schedule", response_model=AmortizationResponse)
async def calculate_amortization(inputs: AmortizationInput):
    """Generate a year-by-year amortization schedule."""
    try:
        schedule = mortgage.generate_yearly_schedule(
            loan_amount=inputs.loan_amount,
            annual_interest_rate=inputs.annual_interest_rate,
            loan_term_years=inputs.term_years,
            monthly_payment=inputs.monthly_payment,
        )
    except OverflowError as e:
        raise _out_of_range(e)

    return AmortizationResponse(
        schedule=[AmortizationYearResponse(**asdict(row)) for row in schedule],
        total_interest=sum(row.interest_paid for row in schedule),
        total_principal=sum(row.principal_paid for row in schedule),
    )


# === Pensions and savings ===

class PensionInput(BaseModel):
    """Input for a pension projection."""

    current_value: float = Field(ge=0)
    monthly_contribution: float = Field(default=0.0, ge=0)
    annual_return_rate: float = Field(gt=-100)
    years: float = Field(gt=0)


class PensionResponse(BaseModel):
    projected_value: float
    formatted_value: str


@router.post("/pension", response_model=PensionResponse)
async def calculate_pension(
    inputs: PensionInput,
    settings: Settings = Depends(get_app_settings),
):
    """Project the future value of a pension pot."""
    try:
        value = pension.calculate_pension_projection(
            inputs.current_value,
            inputs.monthly_contribution,
            inputs.annual_return_rate,
            inputs.years,
        )
    except OverflowError as e:
        raise _out_of_range(e)

    return PensionResponse(
        projected_value=value,
        formatted_value=formatting.format_currency(value, settings.currency_symbol),
    )


class CompoundInterestInput(BaseModel):
    """Input for a compound interest calculation."""

    principal: float = Field(ge=0)
    monthly_contribution: float = Field(default=0.0, ge=0)
    annual_interest_rate: float = Field(gt=-100)
    years: float = Field(gt=0)


class CompoundInterestResponse(BaseModel):
    future_value: float
    total_contributions: float
    interest_earned: float


@router.post("/compound-interest", response_model=CompoundInterestResponse)
async def calculate_compound_interest(inputs: CompoundInterestInput):
    """Calculate savings growth with monthly compounding."""
    try:
        future_value = pension.calculate_compound_interest(
            inputs.principal,
            inputs.monthly_contribution,
            inputs.annual_interest_rate,
            inputs.years,
        )
    except OverflowError as e:
        raise _out_of_range(e)

    contributions = inputs.principal + inputs.monthly_contribution * inputs.years * 12

    return CompoundInterestResponse(
        future_value=future_value,
        total_contributions=contributions,
        interest_earned=future_value - contributions,
    )


class RetirementIncomeInput(BaseModel):
    pension_pot: float = Field(ge=0)
    withdrawal_rate: Optional[float] = None


@router.post("/retirement-income")
async def calculate_retirement_income(
    inputs: RetirementIncomeInput,
    settings: Settings = Depends(get_app_settings),
):
    """Annual income a pension pot supports at a withdrawal rate."""
    rate = inputs.withdrawal_rate
    if rate is None:
        rate = settings.default_withdrawal_rate

    income = pension.calculate_annual_retirement_income(inputs.pension_pot, rate)

    return {
        "annual_income": income,
        "withdrawal_rate": rate,
        "formatted_income": formatting.format_currency(income, settings.currency_symbol),
    }


class RetirementInput(BaseModel):
    """Input for a retirement plan projection."""

    current_age: int = Field(ge=0)
    retirement_age: int = Field(ge=0)
    current_pension: float = Field(default=0.0, ge=0)
    annual_return: float = Field(default=5.0, gt=-100)
    monthly_contribution: float = Field(default=0.0, ge=0)
    employer_contribution: float = Field(default=0.0, ge=0)
    desired_income: float = Field(default=0.0, ge=0)
    withdrawal_rate: Optional[float] = None


class RetirementResponse(BaseModel):
    years_to_retirement: int
    estimated_pension_pot: int
    estimated_annual_income: int
    is_on_track: bool
    pot_at_65: int
    income_at_65: int
    pot_at_70: int
    income_at_70: int


@router.post("/retirement", response_model=RetirementResponse)
async def calculate_retirement(
    inputs: RetirementInput,
    settings: Settings = Depends(get_app_settings),
):
    """Project a retirement plan against a desired income."""
    if inputs.retirement_age < inputs.current_age:
        raise HTTPException(
            status_code=400,
            detail="Retirement age must not be before current age",
        )

    rate = inputs.withdrawal_rate
    if rate is None:
        rate = settings.default_withdrawal_rate

    try:
        projection = pension.project_retirement(
            current_age=inputs.current_age,
            retirement_age=inputs.retirement_age,
            current_pension=inputs.current_pension,
            annual_return=inputs.annual_return,
            monthly_contribution=inputs.monthly_contribution,
            employer_contribution=inputs.employer_contribution,
            desired_income=inputs.desired_income,
            withdrawal_rate=rate,
        )
    except OverflowError as e:
        raise _out_of_range(e)

    return RetirementResponse(**asdict(projection))


# === Budgets ===

class BudgetProgressInput(BaseModel):
    current: float
    target: float = Field(ge=0)


class BudgetProgressResponse(BaseModel):
    percentage: int
    is_over_budget: bool


@router.post("/budget-progress", response_model=BudgetProgressResponse)
async def calculate_budget_progress(inputs: BudgetProgressInput):
    """Calculate spending progress against a budget."""
    progress = budget.calculate_budget_progress(inputs.current, inputs.target)
    return BudgetProgressResponse(**asdict(progress))


# === Salary ===

class SalaryRequest(BaseModel):
    """Input for a take-home pay calculation."""

    annual_salary: float = Field(ge=0)
    tax_code: str = salary.DEFAULT_TAX_CODE
    pension_percent: float = Field(default=5.0, ge=0, le=100)
    pension_amount: float = Field(default=0.0, ge=0)
    use_pension_percent: bool = True
    yearly_bonus: float = Field(default=0.0, ge=0)
    taxable_benefits: float = Field(default=0.0, ge=0)
    cash_allowances: float = Field(default=0.0, ge=0)
    pre_tax_deductions: float = Field(default=0.0, ge=0)
    post_tax_deductions: float = Field(default=0.0, ge=0)


class TaxBandResponse(BaseModel):
    amount: float
    charge: float


class SalaryResponse(BaseModel):
    annual_gross: float
    monthly_gross: float
    annual_taxable: float
    personal_allowance: float
    basic_rate: TaxBandResponse
    higher_rate: TaxBandResponse
    additional_rate: TaxBandResponse
    income_tax: float
    ni_primary: TaxBandResponse
    ni_upper: TaxBandResponse
    national_insurance: float
    annual_pension: float
    monthly_pension: float
    annual_take_home: float
    monthly_take_home: float
    effective_tax_rate: float
    formatted_effective_tax_rate: str


@router.post("/salary", response_model=SalaryResponse)
async def calculate_salary(inputs: SalaryRequest):
    """Break a salary down into tax, National Insurance, pension and take-home pay."""
    breakdown = salary.calculate_take_home(salary.SalaryInput(**inputs.model_dump()))

    return SalaryResponse(
        **asdict(breakdown),
        formatted_effective_tax_rate=formatting.format_percentage(
            breakdown.effective_tax_rate
        ),
    )


# === Formatting ===

class FormatCurrencyInput(BaseModel):
    value: float
    currency: Optional[str] = None


@router.post("/format-currency")
async def format_currency(
    inputs: FormatCurrencyInput,
    settings: Settings = Depends(get_app_settings),
):
    """Format an amount for display."""
    symbol = inputs.currency if inputs.currency is not None else settings.currency_symbol
    return {"formatted": formatting.format_currency(inputs.value, symbol)}
