"""UK income tax with personal allowance taper and Class 1 National Insurance."""

import math
from decimal import Decimal

from pydantic import Field

from src.calculators import rounding
from src.calculators.brackets import ZERO, allocate
from src.calculators.types import BracketAllocation, FrozenModel, Money, TaxBracket


class PersonalAllowanceRules(FrozenModel):
    amount: Money
    taper_threshold: Money
    taper_rate: Money


class NationalInsuranceRules(FrozenModel):
    primary_threshold: Money
    upper_earnings_limit: Money
    main_rate: Money
    upper_rate: Money


class IncomeTaxRules(FrozenModel):
    # Brackets apply to taxable income, i.e. after the personal allowance
    tax_brackets: list[TaxBracket]
    personal_allowance: PersonalAllowanceRules
    national_insurance: NationalInsuranceRules


class IncomeTaxInput(FrozenModel):
    income: Money = Field(ge=0)


class IncomeTaxResult(FrozenModel):
    gross_income: Money
    income_tax: Money
    national_insurance: Money
    personal_allowance: Money
    total_deductions: Money
    net_income: Money
    effective_tax_rate: Money
    tax_bracket_breakdown: list[BracketAllocation]


def personal_allowance(income: Decimal, rules: PersonalAllowanceRules) -> Decimal:
    """Allowance after the taper: reduced by whole pounds above the threshold."""
    if income <= rules.taper_threshold:
        return rules.amount

    reduction = math.floor((income - rules.taper_threshold) * rules.taper_rate)
    return max(ZERO, rules.amount - reduction)


def national_insurance(income: Decimal, rules: NationalInsuranceRules) -> Decimal:
    if income <= rules.primary_threshold:
        return ZERO

    if income <= rules.upper_earnings_limit:
        return (income - rules.primary_threshold) * rules.main_rate

    main_band = (rules.upper_earnings_limit - rules.primary_threshold) * rules.main_rate
    upper_band = (income - rules.upper_earnings_limit) * rules.upper_rate
    return main_band + upper_band


def calculate_net_income(income: Decimal, rules: IncomeTaxRules) -> IncomeTaxResult:
    """Calculate UK net income after income tax and employee NI."""
    policy = rounding.UK
    allowance = personal_allowance(income, rules.personal_allowance)
    taxable_income = max(ZERO, income - allowance)

    brackets = allocate(taxable_income, rules.tax_brackets)
    ni = national_insurance(income, rules.national_insurance)
    total_deductions = brackets.total_tax + ni

    return IncomeTaxResult(
        gross_income=income,
        income_tax=policy.money(brackets.total_tax),
        national_insurance=policy.money(ni),
        personal_allowance=allowance,
        total_deductions=policy.money(total_deductions),
        net_income=policy.money(income - total_deductions),
        effective_tax_rate=policy.rate(brackets.total_tax / income) if income > 0 else ZERO,
        tax_bracket_breakdown=brackets.allocations,
    )


def calculate(input: IncomeTaxInput, rules: IncomeTaxRules) -> IncomeTaxResult:
    return calculate_net_income(input.income, rules)
