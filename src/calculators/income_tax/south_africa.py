"""South Africa personal income tax with age rebates, medical aid credit and UIF."""

from decimal import Decimal

from pydantic import Field

from src.calculators import rounding
from src.calculators.brackets import ZERO, allocate
from src.calculators.types import BracketAllocation, FrozenModel, Money, TaxBracket


class AgeBasedRebate(FrozenModel):
    age_min: int
    amount: Money


class TaxRebates(FrozenModel):
    primary: AgeBasedRebate
    secondary: AgeBasedRebate
    tertiary: AgeBasedRebate


class TaxThresholds(FrozenModel):
    under_65: Money
    age_65_to_74: Money
    age_75_plus: Money


class MedicalAidMonthlyCredit(FrozenModel):
    taxpayer: Money
    first_dependant: Money
    additional_dependant: Money


class MedicalAidTaxCredit(FrozenModel):
    monthly: MedicalAidMonthlyCredit
    annual_multiplier: int = 12


class UifRules(FrozenModel):
    rate: Money
    annual_income_cap: Money
    max_annual_contribution: Money


class IncomeTaxRules(FrozenModel):
    tax_brackets: list[TaxBracket]
    rebates: TaxRebates
    tax_thresholds: TaxThresholds
    medical_aid_tax_credit: MedicalAidTaxCredit
    uif: UifRules


class IncomeTaxInput(FrozenModel):
    income: Money = Field(ge=0)
    age: int = Field(ge=0)
    medical_aid_members: int = Field(default=0, ge=0)


class IncomeTaxResult(FrozenModel):
    gross_income: Money
    income_tax: Money
    uif: Money
    total_deductions: Money
    net_income: Money
    effective_tax_rate: Money
    tax_bracket_breakdown: list[BracketAllocation]


def tax_threshold(age: int, thresholds: TaxThresholds) -> Decimal:
    if age >= 75:
        return thresholds.age_75_plus
    if age >= 65:
        return thresholds.age_65_to_74
    return thresholds.under_65


def rebate_for_age(age: int, rebates: TaxRebates) -> Decimal:
    """Primary rebate always; secondary and tertiary stack once age qualifies."""
    rebate = rebates.primary.amount

    if age >= rebates.secondary.age_min:
        rebate += rebates.secondary.amount

    if age >= rebates.tertiary.age_min:
        rebate += rebates.tertiary.amount

    return rebate


def medical_aid_credit(members: int, credit: MedicalAidTaxCredit) -> Decimal:
    """Annual medical scheme fees tax credit for the given number of members."""
    if members <= 0:
        return ZERO

    monthly = credit.monthly
    monthly_credit = monthly.taxpayer

    if members >= 2:
        monthly_credit += monthly.first_dependant

    if members > 2:
        monthly_credit += (members - 2) * monthly.additional_dependant

    return monthly_credit * credit.annual_multiplier


def compute_uif(income: Decimal, uif: UifRules) -> Decimal:
    capped_income = min(income, uif.annual_income_cap)
    return min(capped_income * uif.rate, uif.max_annual_contribution)


def calculate_net_income(
    income: Decimal,
    rules: IncomeTaxRules,
    age: int,
    medical_aid_members: int = 0,
) -> IncomeTaxResult:
    """Calculate South African net income after PAYE and UIF.

    Income at or below the age-appropriate threshold owes nothing at all, not
    even UIF, and carries no bracket breakdown.
    """
    if income <= tax_threshold(age, rules.tax_thresholds):
        return IncomeTaxResult(
            gross_income=income,
            income_tax=ZERO,
            uif=ZERO,
            total_deductions=ZERO,
            net_income=income,
            effective_tax_rate=ZERO,
            tax_bracket_breakdown=[],
        )

    policy = rounding.SOUTH_AFRICA
    brackets = allocate(income, rules.tax_brackets)
    credits = rebate_for_age(age, rules.rebates) + medical_aid_credit(
        medical_aid_members, rules.medical_aid_tax_credit
    )
    income_tax = max(ZERO, brackets.total_tax - credits)
    uif = compute_uif(income, rules.uif)
    total_deductions = income_tax + uif

    return IncomeTaxResult(
        gross_income=income,
        income_tax=policy.money(income_tax),
        uif=policy.money(uif),
        total_deductions=policy.money(total_deductions),
        net_income=policy.money(income - total_deductions),
        effective_tax_rate=policy.rate(income_tax / income),
        tax_bracket_breakdown=brackets.allocations,
    )


def calculate(input: IncomeTaxInput, rules: IncomeTaxRules) -> IncomeTaxResult:
    return calculate_net_income(
        input.income,
        rules,
        age=input.age,
        medical_aid_members=input.medical_aid_members,
    )
