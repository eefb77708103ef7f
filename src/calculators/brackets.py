"""Progressive bracket engine: income tax allocation, corporate breakdowns, duty bands."""

from collections.abc import Sequence
from decimal import Decimal
from typing import NamedTuple

from pydantic import model_validator

from src.calculators.errors import ConfigurationError
from src.calculators.types import (
    BracketAllocation,
    CorporateBreakdown,
    FrozenModel,
    Money,
    TaxBracket,
)

ZERO = Decimal("0")


class BracketResult(NamedTuple):
    """Outcome of allocating an income across a bracket table."""

    total_tax: Decimal
    allocations: list[BracketAllocation]
    marginal_rate: Decimal


def _allocation(
    index: int,
    bracket: TaxBracket,
    amount: Decimal = ZERO,
    tax: Decimal = ZERO,
) -> BracketAllocation:
    return BracketAllocation(
        bracket_index=index,
        bracket_name=f"Bracket {index + 1}",
        lower=bracket.lower,
        upper=bracket.upper,
        rate=bracket.rate,
        amount_in_bracket=amount,
        tax_on_amount=tax,
    )


def allocate(income: Decimal, brackets: Sequence[TaxBracket]) -> BracketResult:
    """Allocate income across ascending brackets.

    Emits one allocation per bracket up to and including the first bracket
    whose lower bound the income does not exceed; that bracket gets a zero
    allocation and the walk stops. An unbounded top bracket is clamped to the
    income, so it never taxes more than the income reaches.

    Args:
        income: Amount to allocate. Negative income is not rejected here; it
            stops at the first bracket like zero income does.
        brackets: Brackets ordered ascending by lower bound, without gaps.

    Returns:
        BracketResult with total tax, per-bracket allocations and the rate of
        the last bracket that taxed anything (0 if none did).
    """
    total_tax = ZERO
    marginal_rate = ZERO
    allocations: list[BracketAllocation] = []

    for index, bracket in enumerate(brackets):
        if income <= bracket.lower:
            allocations.append(_allocation(index, bracket))
            break

        upper = bracket.upper if bracket.upper is not None else income
        taxable = min(upper, income) - bracket.lower

        if taxable > 0:
            tax = taxable * bracket.rate
            total_tax += tax
            marginal_rate = bracket.rate
            allocations.append(_allocation(index, bracket, taxable, tax))
        else:
            allocations.append(_allocation(index, bracket))

    return BracketResult(total_tax, allocations, marginal_rate)


def progressive_breakdown(
    income: Decimal,
    brackets: Sequence[TaxBracket],
) -> tuple[Decimal, list[CorporateBreakdown]]:
    """Corporate variant of the bracket walk.

    Only brackets that actually tax something produce a row, and the walk stops
    at the first bracket the income does not reach.
    """
    total = ZERO
    breakdowns: list[CorporateBreakdown] = []

    for bracket in brackets:
        if income <= bracket.lower:
            break

        upper = income if bracket.upper is None else min(income, bracket.upper)
        taxable = upper - bracket.lower

        if taxable > 0:
            tax = taxable * bracket.rate
            total += tax
            breakdowns.append(
                CorporateBreakdown(
                    lower=f"{bracket.lower}",
                    upper=f"{bracket.upper}" if bracket.upper is not None else "Above",
                    rate=bracket.rate,
                    amount=tax,
                )
            )

    return total, breakdowns


class DutyBand(FrozenModel):
    """A stamp/transfer duty band: capped (up_to) or the open tail (above)."""

    up_to: Money | None = None
    above: Money | None = None
    rate: Money

    @model_validator(mode="after")
    def _one_bound(self) -> "DutyBand":
        if (self.up_to is None) == (self.above is None):
            raise ConfigurationError("Duty band needs exactly one of up_to / above")
        return self


def banded_duty(price: Decimal, bands: Sequence[DutyBand]) -> Decimal:
    """Cumulative duty across bands.

    Each up_to band taxes the slice between the previous limit and its own
    cap; an above band taxes everything past its threshold and ends the scan.
    """
    duty = ZERO
    previous_limit = ZERO

    for band in bands:
        if band.up_to is not None and price > previous_limit:
            taxable = min(price, band.up_to) - previous_limit
            duty += taxable * band.rate
            previous_limit = band.up_to

        if band.above is not None and price > band.above:
            duty += (price - band.above) * band.rate
            break

    return duty
