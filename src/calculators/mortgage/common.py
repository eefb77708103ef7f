"""Helpers shared by the mortgage calculators."""

from collections.abc import Iterable
from decimal import Decimal

from src.calculators.amortization import ZERO
from src.calculators.errors import CoverageError, InvalidInputError


def loan_amount(property_price: Decimal, down_payment: Decimal) -> Decimal:
    """Amount to borrow; must be positive."""
    loan = property_price - down_payment
    if loan <= 0:
        raise InvalidInputError("Invalid loan amount: down payment must be less than property price")
    return loan


def insurance_premium(
    loan: Decimal,
    ratio: Decimal,
    threshold: Decimal,
    tiers: Iterable[tuple[Decimal, Decimal]],
    ratio_name: str = "LTV",
) -> Decimal:
    """Mortgage default insurance premium.

    Nothing is due while the loan ratio is at or under the threshold. Above
    it, the first (max_ratio, rate) tier covering the ratio prices the whole
    loan.

    Raises:
        CoverageError: If no tier covers the ratio.
    """
    if ratio <= threshold:
        return ZERO

    for max_ratio, rate in tiers:
        if ratio <= max_ratio:
            return loan * rate

    raise CoverageError(f"{ratio_name} exceeds maximum insurable limit")


def totals(payment: Decimal, total_payments: int, principal: Decimal) -> tuple[Decimal, Decimal]:
    """(total paid, total interest) over the life of the loan."""
    total_paid = payment * total_payments
    return total_paid, total_paid - principal
