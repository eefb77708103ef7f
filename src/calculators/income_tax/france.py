"""France income tax (impôt sur le revenu) with quotient familial and social contributions."""

from decimal import Decimal

from pydantic import Field

from src.calculators import rounding
from src.calculators.brackets import ZERO, allocate
from src.calculators.errors import InvalidInputError
from src.calculators.types import BracketAllocation, FrozenModel, Money, TaxBracket


class QuotientFamilial(FrozenModel):
    enabled: bool = True


class EmployeeContribution(FrozenModel):
    rate: Money


class SocialContributions(FrozenModel):
    employee: EmployeeContribution


class IncomeTaxRules(FrozenModel):
    tax_brackets: list[TaxBracket]
    quotient_familial: QuotientFamilial = Field(default_factory=QuotientFamilial)
    social_contributions: SocialContributions


class IncomeTaxInput(FrozenModel):
    income: Money = Field(ge=0)
    family_parts: Money = Decimal("1")


class IncomeTaxResult(FrozenModel):
    gross_income: Money
    income_tax: Money
    social_contributions: Money
    total_deductions: Money
    net_income: Money
    average_tax_rate: Money  # fraction, rounded to 2 places
    marginal_tax_rate: Money
    tax_bracket_breakdown: list[BracketAllocation]


def taxable_per_part(income: Decimal, family_parts: Decimal, rules: IncomeTaxRules) -> Decimal:
    """Income the brackets are applied to.

    With the quotient familial enabled the household income is split across
    its parts; disabled, the whole income is taxed as one part and the tax is
    still multiplied back by the parts.
    """
    if rules.quotient_familial.enabled:
        return income / family_parts
    return family_parts * income / family_parts


def calculate_net_income(
    income: Decimal,
    rules: IncomeTaxRules,
    family_parts: Decimal = Decimal("1"),
) -> IncomeTaxResult:
    """Calculate French net income after income tax and employee contributions.

    The bracket breakdown is expressed per part.

    Raises:
        InvalidInputError: If family_parts is not positive.
    """
    if family_parts <= 0:
        raise InvalidInputError(f"Family parts must be positive, got {family_parts}")

    policy = rounding.FRANCE
    brackets = allocate(taxable_per_part(income, family_parts, rules), rules.tax_brackets)
    income_tax = brackets.total_tax * family_parts
    social_contributions = income * rules.social_contributions.employee.rate
    total_deductions = income_tax + social_contributions

    return IncomeTaxResult(
        gross_income=income,
        income_tax=policy.money(income_tax),
        social_contributions=policy.money(social_contributions),
        total_deductions=policy.money(total_deductions),
        net_income=policy.money(income - total_deductions),
        average_tax_rate=policy.rate(income_tax / income) if income > 0 else ZERO,
        marginal_tax_rate=brackets.marginal_rate,
        tax_bracket_breakdown=brackets.allocations,
    )


def calculate(input: IncomeTaxInput, rules: IncomeTaxRules) -> IncomeTaxResult:
    return calculate_net_income(input.income, rules, family_parts=input.family_parts)
