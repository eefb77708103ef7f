"""Corporate tax regimes and the shared dispatch over them."""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import Field

from src.calculators.brackets import ZERO, progressive_breakdown
from src.calculators.errors import ConfigurationError, RegimeNotApplicableError
from src.calculators.types import CorporateBreakdown, FrozenModel, Money, TaxBracket


class RegimeConditions(FrozenModel):
    max_turnover: Money | None = None


class FlatRegime(FrozenModel):
    type: Literal["flat"]
    rate: Money
    conditions: RegimeConditions | None = None


class ProgressiveRegime(FrozenModel):
    type: Literal["progressive"]
    brackets: list[TaxBracket]
    conditions: RegimeConditions | None = None


Regime = Annotated[FlatRegime | ProgressiveRegime, Field(discriminator="type")]


class CorporateRules(FrozenModel):
    """Named regimes, e.g. general / small_business or LARGE / SBC."""

    regimes: dict[str, Regime]


class CorporateTaxResult(FrozenModel):
    corporate_tax: Money
    effective_tax_rate: Money  # percentage, 0-100
    breakdowns: list[CorporateBreakdown]


def select_regime(rules: CorporateRules, key: str) -> FlatRegime | ProgressiveRegime:
    regime = rules.regimes.get(key)
    if regime is None:
        raise ConfigurationError(f"Unknown tax regime: {key}")
    return regime


def check_turnover(
    regime: FlatRegime | ProgressiveRegime,
    annual_turnover: Decimal | None,
    label: str,
) -> None:
    """Reject a regime whose turnover ceiling the company exceeds.

    Raises:
        RegimeNotApplicableError: If turnover is above conditions.max_turnover.
    """
    if regime.conditions is None or regime.conditions.max_turnover is None:
        return
    if annual_turnover is not None and annual_turnover > regime.conditions.max_turnover:
        raise RegimeNotApplicableError(f"{label} regime not applicable: turnover exceeded")


def apply_regime(
    regime: FlatRegime | ProgressiveRegime,
    income: Decimal,
) -> tuple[Decimal, list[CorporateBreakdown]]:
    """Tax and breakdown rows for a flat or progressive regime."""
    if isinstance(regime, FlatRegime):
        tax = income * regime.rate
        return tax, [CorporateBreakdown(lower="0", upper="Above", rate=regime.rate, amount=tax)]

    if isinstance(regime, ProgressiveRegime):
        return progressive_breakdown(income, regime.brackets)

    raise ConfigurationError(f"Unsupported regime type: {type(regime).__name__}")


def effective_rate_percent(tax: Decimal, income: Decimal) -> Decimal:
    return tax / income * 100 if income > 0 else ZERO


def build_result(tax: Decimal, income: Decimal, breakdowns: list[CorporateBreakdown]) -> CorporateTaxResult:
    return CorporateTaxResult(
        corporate_tax=tax,
        effective_tax_rate=effective_rate_percent(tax, income),
        breakdowns=breakdowns,
    )
