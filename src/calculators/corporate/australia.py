"""Australia company tax: base-rate entity (small business) vs general rate."""

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
    """Calculate company tax under the general or small business regime.

    Raises:
        ConfigurationError: If the selected regime is missing from the rules.
        RegimeNotApplicableError: If turnover exceeds the regime's ceiling.
    """
    key = "small_business" if input.is_small_business else "general"
    regime = select_regime(rules, key)
    check_turnover(regime, input.annual_turnover, "Small business")

    tax, breakdowns = apply_regime(regime, input.taxable_income)
    return build_result(tax, input.taxable_income, breakdowns)
