"""Shared value types for the calculators.

All money amounts and rates are Decimals. Floats coming from YAML or JSON are
converted through their string form so 0.2 becomes Decimal("0.2") rather than
the binary approximation.
"""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer


def _to_decimal(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(str(value))
    return value


Money = Annotated[
    Decimal,
    BeforeValidator(_to_decimal),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class FrozenModel(BaseModel):
    """Immutable record that rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class TaxBracket(FrozenModel):
    """A single progressive bracket, half-open [lower, upper)."""

    lower: Money
    upper: Money | None = None  # None = no cap
    rate: Money


class BracketAllocation(FrozenModel):
    """How much of the income fell into one bracket and the tax on it."""

    bracket_index: int
    bracket_name: str
    lower: Money
    upper: Money | None
    rate: Money
    amount_in_bracket: Money
    tax_on_amount: Money


class CorporateBreakdown(FrozenModel):
    """A corporate tax line with string bounds ("Above" when unbounded)."""

    lower: str
    upper: str
    rate: Money
    amount: Money


class AmortizationScheduleItem(FrozenModel):
    """Principal and interest paid during one year, and the closing balance."""

    year: int
    principal: Money
    interest: Money
    balance: Money


class FeeItem(FrozenModel):
    value: Money
    label: str


class OtherFees(FrozenModel):
    """The three labelled fee lines every mortgage result carries."""

    notary_fees: FeeItem
    bank_fees: FeeItem
    monthly_insurance_fees: FeeItem


def other_fees(
    notary: tuple[Decimal, str],
    bank: tuple[Decimal, str],
    insurance: tuple[Decimal, str],
) -> OtherFees:
    """Build an OtherFees record from (value, label) pairs."""
    return OtherFees(
        notary_fees=FeeItem(value=notary[0], label=notary[1]),
        bank_fees=FeeItem(value=bank[0], label=bank[1]),
        monthly_insurance_fees=FeeItem(value=insurance[0], label=insurance[1]),
    )
