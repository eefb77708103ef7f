"""UK corporation tax with marginal relief between the small profits and main rates."""

from decimal import Decimal
from typing import Literal

from pydantic import Field

from src.calculators.brackets import ZERO
from src.calculators.corporate.regimes import CorporateTaxResult, build_result
from src.calculators.types import CorporateBreakdown, FrozenModel, Money


class FlatRate(FrozenModel):
    type: Literal["flat"] = "flat"
    rate: Money


class MarginalReliefRule(FrozenModel):
    type: Literal["marginal_relief"] = "marginal_relief"
    main_rate: Money
    small_profits_rate: Money  # not read; regimes.small_profits.rate applies below lower_limit
    upper_limit: Money
    lower_limit: Money
    standard_fraction: Money


class UKRegimes(FrozenModel):
    small_profits: FlatRate
    main: FlatRate
    marginal_relief: MarginalReliefRule


class CorporateTaxRules(FrozenModel):
    regimes: UKRegimes


class CorporateTaxInput(FrozenModel):
    taxable_income: Money = Field(ge=0)


def marginal_relief(income: Decimal, rules: MarginalReliefRule) -> Decimal:
    """Relief = standard fraction x (upper limit - profits)."""
    return rules.standard_fraction * (rules.upper_limit - income)


def calculate(input: CorporateTaxInput, rules: CorporateTaxRules) -> CorporateTaxResult:
    """Calculate corporation tax for one full financial year.

    Profits up to the lower limit pay the small profits rate, profits from the
    upper limit pay the main rate, and profits in between pay the main rate
    less marginal relief, reported as a negative breakdown row.
    """
    income = input.taxable_income
    small_profits = rules.regimes.small_profits
    main = rules.regimes.main
    relief_rule = rules.regimes.marginal_relief

    if income <= 0:
        return CorporateTaxResult(corporate_tax=ZERO, effective_tax_rate=ZERO, breakdowns=[])

    if income <= relief_rule.lower_limit:
        tax = income * small_profits.rate
        breakdowns = [
            CorporateBreakdown(
                lower="0",
                upper=f"{relief_rule.lower_limit}",
                rate=small_profits.rate,
                amount=tax,
            )
        ]
    elif income >= relief_rule.upper_limit:
        tax = income * main.rate
        breakdowns = [CorporateBreakdown(lower="0", upper="Above", rate=main.rate, amount=tax)]
    else:
        gross_tax = income * relief_rule.main_rate
        relief = marginal_relief(income, relief_rule)
        tax = gross_tax - relief
        breakdowns = [
            CorporateBreakdown(lower="0", upper="Above", rate=relief_rule.main_rate, amount=gross_tax),
            CorporateBreakdown(
                lower=f"{relief_rule.lower_limit}",
                upper=f"{relief_rule.upper_limit}",
                rate=-relief_rule.standard_fraction,
                amount=-relief,
            ),
        ]

    return build_result(tax, income, breakdowns)
