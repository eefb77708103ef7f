"""Canada federal corporate tax: small business deduction vs general rate."""

from pydantic import Field

from src.calculators.corporate.regimes import (
    CorporateRules,
    CorporateTaxResult,
    apply_regime,
    build_result,
    select_regime,
)
from src.calculators.types import FrozenModel, Money

CorporateTaxRules = CorporateRules


class CorporateTaxInput(FrozenModel):
    taxable_income: Money = Field(ge=0)
    is_small_business: bool


def calculate(input: CorporateTaxInput, rules: CorporateTaxRules) -> CorporateTaxResult:
    """Calculate federal corporate tax.

    The small business limit is expressed in the rules as a progressive regime
    (reduced rate up to the limit, general rate above).
    """
    key = "small_business" if input.is_small_business else "general"
    regime = select_regime(rules, key)

    tax, breakdowns = apply_regime(regime, input.taxable_income)
    return build_result(tax, input.taxable_income, breakdowns)
