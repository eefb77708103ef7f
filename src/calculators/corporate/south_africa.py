"""South Africa company tax: standard (LARGE) vs small business corporation (SBC)."""

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
    regime: str  # key into rules.regimes, e.g. LARGE or SBC
    annual_turnover: Money | None = None  # only checked when the regime has a ceiling


def calculate(input: CorporateTaxInput, rules: CorporateTaxRules) -> CorporateTaxResult:
    regime = select_regime(rules, input.regime)
    check_turnover(regime, input.annual_turnover, "SBC")

    tax, breakdowns = apply_regime(regime, input.taxable_income)
    return build_result(tax, input.taxable_income, breakdowns)
