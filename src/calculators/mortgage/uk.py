"""UK repayment mortgage with Stamp Duty Land Tax and first-time buyer relief."""

from decimal import Decimal
from typing import Literal

from pydantic import Field

from src.calculators.amortization import (
    ZERO,
    amortization_schedule,
    annuity_payment,
    simple_periodic_rate,
)
from src.calculators.brackets import DutyBand, banded_duty
from src.calculators.mortgage.common import loan_amount, totals
from src.calculators.types import AmortizationScheduleItem, FrozenModel, Money, OtherFees, other_fees

MONTHS = 12


class LoanConstraints(FrozenModel):
    """Published lending limits, informational only."""

    max_ltv_percent: Money
    max_amortization_years: int


class InterestRules(FrozenModel):
    compounding: Literal["MONTHLY"] = "MONTHLY"


class FirstTimeBuyerStampDuty(FrozenModel):
    brackets: list[DutyBand]
    max_eligible_property_price: Money


class StampDutyRules(FrozenModel):
    standard_brackets: list[DutyBand]
    first_time_buyer: FirstTimeBuyerStampDuty


class MortgageRules(FrozenModel):
    loan_constraints: LoanConstraints | None = None
    interest: InterestRules = InterestRules()
    stamp_duty: StampDutyRules


class MortgageInput(FrozenModel):
    property_price: Money = Field(gt=0)
    down_payment: Money = Field(ge=0)
    annual_interest_rate: Money = Field(ge=0, le=100)  # percent
    amortization_years: int = Field(gt=0, le=100)
    is_first_time_buyer: bool = False


class MortgageResult(FrozenModel):
    loan_amount: Money
    total_mortgage: Money
    monthly_payment: Money
    total_interest_paid: Money
    total_paid: Money
    stamp_duty: Money
    amortization_schedule: list[AmortizationScheduleItem]
    other_fees: OtherFees


def stamp_duty(price: Decimal, is_first_time_buyer: bool, rules: StampDutyRules) -> Decimal:
    """SDLT on the purchase price.

    First-time buyer relief only applies up to its maximum eligible price;
    above that the standard bands apply to the whole purchase.
    """
    ftb = rules.first_time_buyer
    if is_first_time_buyer and price <= ftb.max_eligible_property_price:
        return banded_duty(price, ftb.brackets)
    return banded_duty(price, rules.standard_brackets)


def calculate(input: MortgageInput, rules: MortgageRules) -> MortgageResult:
    loan = loan_amount(input.property_price, input.down_payment)
    total_payments = input.amortization_years * MONTHS
    monthly_rate = simple_periodic_rate(input.annual_interest_rate, MONTHS)

    payment = annuity_payment(loan, monthly_rate, total_payments)
    total_paid, total_interest = totals(payment, total_payments, loan)
    duty = stamp_duty(input.property_price, input.is_first_time_buyer, rules.stamp_duty)

    return MortgageResult(
        loan_amount=loan,
        total_mortgage=loan,
        monthly_payment=payment,
        total_interest_paid=total_interest,
        total_paid=total_paid,
        stamp_duty=duty,
        amortization_schedule=amortization_schedule(
            loan, monthly_rate, payment, total_payments, input.amortization_years, MONTHS
        ),
        other_fees=other_fees(
            (duty, "STAMP_DUTY"),
            (ZERO, "BANK_FEES"),
            (ZERO, "MONTHLY_INSURANCE_FEES"),
        ),
    )
