"""Fixed-payment amortization engine shared by the mortgage calculators."""

from decimal import Decimal

from src.calculators.errors import UnsupportedCompoundingError
from src.calculators.types import AmortizationScheduleItem

ZERO = Decimal("0")
ONE = Decimal("1")

SEMI_ANNUAL = "SEMI_ANNUAL"


def annuity_payment(principal: Decimal, rate: Decimal, periods: int) -> Decimal:
    """Level payment that repays principal over periods at a periodic rate.

    P = L * r(1+r)^n / ((1+r)^n - 1); straight-line L / n at a zero rate.
    """
    if rate == 0:
        return principal / periods

    growth = (ONE + rate) ** periods
    return principal * (rate * growth) / (growth - ONE)


def annuity_principal(payment: Decimal, rate: Decimal, periods: int) -> Decimal:
    """Largest principal a level payment can repay (inverse of annuity_payment)."""
    if rate == 0:
        return payment * periods

    return payment * ((ONE - (ONE + rate) ** -periods) / rate)


def simple_periodic_rate(annual_rate_percent: Decimal, periods_per_year: int) -> Decimal:
    """Nominal annual percentage split evenly across payment periods."""
    return annual_rate_percent / 100 / periods_per_year


def canadian_periodic_rate(
    annual_rate: Decimal,
    compounding: str,
    periods_per_year: int,
) -> Decimal:
    """Periodic rate for a nominal rate compounded semi-annually.

    Canadian fixed-rate mortgages quote a nominal annual rate compounded twice a
    year; the effective annual rate is then spread over the payment periods.

    Args:
        annual_rate: Nominal annual rate as a fraction (0.05 for 5%).
        compounding: Must be SEMI_ANNUAL.
        periods_per_year: Payments per year.

    Raises:
        UnsupportedCompoundingError: For any other compounding mode.
    """
    if compounding != SEMI_ANNUAL:
        raise UnsupportedCompoundingError(
            f"Only Canadian semi-annual compounding supported, got {compounding}"
        )

    semi_annual_rate = annual_rate / 2
    effective_annual_rate = (ONE + semi_annual_rate) ** 2 - ONE
    return (ONE + effective_annual_rate) ** (ONE / periods_per_year) - ONE


def amortization_schedule(
    principal: Decimal,
    periodic_rate: Decimal,
    payment: Decimal,
    total_periods: int,
    years: int,
    periods_per_year: int,
) -> list[AmortizationScheduleItem]:
    """Year-by-year principal/interest split for a level-payment loan.

    The last year may hold fewer payments than periods_per_year. The schedule
    ends early once the balance is paid off; reported balances never go below
    zero.
    """
    schedule: list[AmortizationScheduleItem] = []
    balance = principal

    for year in range(1, years + 1):
        yearly_principal = ZERO
        yearly_interest = ZERO

        payments_in_year = min(periods_per_year, total_periods - (year - 1) * periods_per_year)

        for _ in range(payments_in_year):
            interest = balance * periodic_rate
            principal_paid = payment - interest

            yearly_interest += interest
            yearly_principal += principal_paid
            balance -= principal_paid

        schedule.append(
            AmortizationScheduleItem(
                year=year,
                principal=yearly_principal,
                interest=yearly_interest,
                balance=max(ZERO, balance),
            )
        )

        if balance <= 0:
            break

    return schedule
