"""Canada federal income tax with CPP and EI contributions."""

from decimal import Decimal
from typing import Literal

from pydantic import Field

from src.calculators import rounding
from src.calculators.brackets import ZERO, allocate
from src.calculators.types import BracketAllocation, FrozenModel, Money, TaxBracket


class TaxCredit(FrozenModel):
    amount: Money
    type: Literal["non_refundable", "refundable"] = "non_refundable"
    rate: Money


class CPPContribution(FrozenModel):
    rate: Money
    max_contribution: Money
    exemption: Money


class EIContribution(FrozenModel):
    rate: Money
    max_insurable_earnings: Money
    max_contribution: Money


class Contributions(FrozenModel):
    cpp: CPPContribution | None = None
    ei: EIContribution | None = None


class IncomeTaxRules(FrozenModel):
    tax_brackets: list[TaxBracket]
    credits: dict[str, TaxCredit] = Field(default_factory=dict)
    contributions: Contributions = Field(default_factory=Contributions)


class IncomeTaxInput(FrozenModel):
    income: Money = Field(ge=0)


class IncomeTaxResult(FrozenModel):
    gross_income: Money
    income_tax: Money
    cpp: Money
    ei: Money
    total_deductions: Money
    net_income: Money
    effective_tax_rate: Money  # fraction of gross income
    tax_bracket_breakdown: list[BracketAllocation]


def apply_credits(tax: Decimal, credits: dict[str, TaxCredit]) -> Decimal:
    """Subtract sum(amount * rate) over all credits, never below zero."""
    total_credits = sum((c.amount * c.rate for c in credits.values()), ZERO)
    return max(ZERO, tax - total_credits)


def compute_cpp(income: Decimal, cpp: CPPContribution | None) -> Decimal:
    if cpp is None or income <= cpp.exemption:
        return ZERO

    contributable = income - cpp.exemption
    return min(contributable * cpp.rate, cpp.max_contribution)


def compute_ei(income: Decimal, ei: EIContribution | None) -> Decimal:
    if ei is None:
        return ZERO

    insurable = min(income, ei.max_insurable_earnings)
    return min(insurable * ei.rate, ei.max_contribution)


def calculate_net_income(income: Decimal, rules: IncomeTaxRules) -> IncomeTaxResult:
    """Calculate Canadian net income after federal tax, CPP and EI.

    Args:
        income: Gross annual employment income.
        rules: Federal brackets, credits and contribution parameters.

    Returns:
        IncomeTaxResult with money rounded to cents and the effective rate as
        a fraction rounded to 2 places (0 for zero income).
    """
    policy = rounding.CANADA
    brackets = allocate(income, rules.tax_brackets)
    net_tax = apply_credits(brackets.total_tax, rules.credits)
    cpp = compute_cpp(income, rules.contributions.cpp)
    ei = compute_ei(income, rules.contributions.ei)
    total_deductions = net_tax + cpp + ei

    return IncomeTaxResult(
        gross_income=income,
        income_tax=policy.money(net_tax),
        cpp=policy.money(cpp),
        ei=policy.money(ei),
        total_deductions=policy.money(total_deductions),
        net_income=policy.money(income - total_deductions),
        effective_tax_rate=policy.rate(net_tax / income) if income > 0 else ZERO,
        tax_bracket_breakdown=brackets.allocations,
    )


def calculate(input: IncomeTaxInput, rules: IncomeTaxRules) -> IncomeTaxResult:
    return calculate_net_income(input.income, rules)
