"""France impôt sur les sociétés: reduced SME rate vs standard rate."""

from pydantic import Field

from src.calculators.corporate.regimes import (
    CorporateRules,
    CorporateTaxResult,
    apply_regime,
    build_result,
    check_turnover,
    select_regime,
)
from src.calculators.types import FrozenModel, Money

CorporateTaxRules = CorporateRules


class CorporateTaxInput(FrozenModel):
    taxable_income: Money = Field(ge=0)
    annual_turnover: Money
    is_small_business: bool


def calculate(input: CorporateTaxInput, rules: CorporateTaxRules) -> CorporateTaxResult:
    key = "small_business" if input.is_small_business else "general"
    regime = select_regime(rules, key)
    check_turnover(regime, input.annual_turnover, "SME")

    tax, breakdowns = apply_regime(regime, input.taxable_income)
    return build_result(tax, input.taxable_income, breakdowns)
