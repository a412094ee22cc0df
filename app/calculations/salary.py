"""
Salary Calculations

UK take-home pay: income tax bands, National Insurance and pension
deductions using the 2023/24 thresholds.
"""

import re
from typing import Optional
from dataclasses import dataclass

# Income tax (2023/24)
PERSONAL_ALLOWANCE = 12570
BASIC_RATE_THRESHOLD = 50270
HIGHER_RATE_THRESHOLD = 125140
BASIC_RATE = 20
HIGHER_RATE = 40
ADDITIONAL_RATE = 45
ALLOWANCE_TAPER_THRESHOLD = 100000

# National Insurance (2023/24)
NI_PRIMARY_THRESHOLD = 12570
NI_UPPER_EARNINGS_LIMIT = 50270
NI_PRIMARY_RATE = 12
NI_UPPER_RATE = 2

DEFAULT_TAX_CODE = "1257L"

_TAX_CODE_PATTERN = re.compile(r"^(\d+)[A-Z]$")


@dataclass
class SalaryInput:
    """Annual pay and deductions for a take-home calculation."""

    annual_salary: float
    tax_code: str = DEFAULT_TAX_CODE
    pension_percent: float = 5.0
    pension_amount: float = 0.0
    use_pension_percent: bool = True
    yearly_bonus: float = 0.0
    taxable_benefits: float = 0.0
    cash_allowances: float = 0.0
    pre_tax_deductions: float = 0.0
    post_tax_deductions: float = 0.0


@dataclass
class TaxBand:
    """Income falling in a band and the tax or contribution charged on it."""

    amount: float
    charge: float


@dataclass
class SalaryBreakdown:
    """Result of a take-home pay calculation."""

    annual_gross: float
    monthly_gross: float
    annual_taxable: float
    personal_allowance: float
    basic_rate: TaxBand
    higher_rate: TaxBand
    additional_rate: TaxBand
    income_tax: float
    ni_primary: TaxBand
    ni_upper: TaxBand
    national_insurance: float
    annual_pension: float
    monthly_pension: float
    annual_take_home: float
    monthly_take_home: float
    effective_tax_rate: float


def personal_allowance_from_tax_code(tax_code: Optional[str]) -> int:
    """
    Derive the personal allowance from a tax code such as "1257L".

    Codes that are not digits followed by a single letter fall back to
    the standard allowance.
    """
    match = _TAX_CODE_PATTERN.match(tax_code or "")
    if match:
        return int(match.group(1)) * 10
    return PERSONAL_ALLOWANCE


def calculate_income_tax(annual_taxable: float, personal_allowance: float):
    """
    Split taxable income across the income tax bands.

    The allowance is reduced by 1 for every 2 of taxable income above
    100,000, and the basic rate band widens by the same amount.

    Returns:
        Tuple of (adjusted allowance, basic band, higher band, additional band)
    """
    allowance = personal_allowance
    if annual_taxable > ALLOWANCE_TAPER_THRESHOLD:
        excess = annual_taxable - ALLOWANCE_TAPER_THRESHOLD
        allowance -= min(personal_allowance, excess // 2)

    remaining = annual_taxable
    remaining -= min(allowance, remaining)

    basic = min(BASIC_RATE_THRESHOLD - allowance, remaining)
    remaining -= basic

    higher = min(HIGHER_RATE_THRESHOLD - BASIC_RATE_THRESHOLD, remaining)
    remaining -= higher

    return (
        allowance,
        TaxBand(amount=basic, charge=basic * BASIC_RATE / 100),
        TaxBand(amount=higher, charge=higher * HIGHER_RATE / 100),
        TaxBand(amount=remaining, charge=remaining * ADDITIONAL_RATE / 100),
    )


def calculate_national_insurance(annual_salary: float):
    """
    Employee National Insurance on salary.

    Returns:
        Tuple of (main rate band, upper rate band)
    """
    remaining = annual_salary
    remaining -= min(NI_PRIMARY_THRESHOLD, remaining)

    primary = min(NI_UPPER_EARNINGS_LIMIT - NI_PRIMARY_THRESHOLD, remaining)
    remaining -= primary

    return (
        TaxBand(amount=primary, charge=primary * NI_PRIMARY_RATE / 100),
        TaxBand(amount=remaining, charge=remaining * NI_UPPER_RATE / 100),
    )


def calculate_take_home(data: SalaryInput) -> SalaryBreakdown:
    """
    Calculate take-home pay from salary and deductions.

    Only the base salary attracts National Insurance. Bonus and cash
    allowances count toward gross pay; taxable benefits are taxed but not paid.

    Args:
        data: SalaryInput

    Returns:
        SalaryBreakdown
    """
    if data.use_pension_percent:
        pension = data.annual_salary * data.pension_percent / 100
    else:
        pension = data.pension_amount

    annual_gross = data.annual_salary + data.yearly_bonus + data.cash_allowances
    annual_taxable = (
        data.annual_salary
        + data.yearly_bonus
        + data.taxable_benefits
        - pension
        - data.pre_tax_deductions
    )

    allowance, basic, higher, additional = calculate_income_tax(
        annual_taxable, personal_allowance_from_tax_code(data.tax_code)
    )
    income_tax = basic.charge + higher.charge + additional.charge

    ni_primary, ni_upper = calculate_national_insurance(data.annual_salary)
    national_insurance = ni_primary.charge + ni_upper.charge

    annual_take_home = (
        annual_gross - income_tax - national_insurance - pension - data.post_tax_deductions
    )

    effective_tax_rate = 0.0
    if annual_gross:
        effective_tax_rate = (income_tax + national_insurance) / annual_gross * 100

    return SalaryBreakdown(
        annual_gross=annual_gross,
        monthly_gross=annual_gross / 12,
        annual_taxable=annual_taxable,
        personal_allowance=allowance,
        basic_rate=basic,
        higher_rate=higher,
        additional_rate=additional,
        income_tax=income_tax,
        ni_primary=ni_primary,
        ni_upper=ni_upper,
        national_insurance=national_insurance,
        annual_pension=pension,
        monthly_pension=pension / 12,
        annual_take_home=annual_take_home,
        monthly_take_home=annual_take_home / 12,
        effective_tax_rate=effective_tax_rate,
    )
