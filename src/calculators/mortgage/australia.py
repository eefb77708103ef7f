"""Australia mortgage: lenders mortgage insurance and state stamp duty."""

from typing import Literal

from pydantic import Field

from src.calculators.amortization import (
    ZERO,
    amortization_schedule,
    annuity_payment,
    simple_periodic_rate,
)
from src.calculators.brackets import DutyBand, banded_duty
from src.calculators.mortgage.common import insurance_premium, loan_amount, totals
from src.calculators.types import AmortizationScheduleItem, FrozenModel, Money, OtherFees, other_fees

PAYMENTS_PER_YEAR = {
    "MONTHLY": 12,
    "FORTNIGHTLY": 26,
    "WEEKLY": 52,
}


class LoanConstraints(FrozenModel):
    """Published lending limits, informational only."""

    max_lvr: Money
    max_amortization_years: int


class LmiRate(FrozenModel):
    max_lvr: Money
    rate: Money


class LendersMortgageInsuranceRules(FrozenModel):
    required_above_lvr: Money
    premium_rates: list[LmiRate]
    premium_added_to_loan: bool


class InterestRules(FrozenModel):
    compounding: Literal["MONTHLY"] = "MONTHLY"


class StampDutyRules(FrozenModel):
    brackets: list[DutyBand]


class MortgageRules(FrozenModel):
    loan_constraints: LoanConstraints | None = None
    lenders_mortgage_insurance: LendersMortgageInsuranceRules
    interest: InterestRules = InterestRules()
    stamp_duty: StampDutyRules


class MortgageInput(FrozenModel):
    property_price: Money = Field(gt=0)
    down_payment: Money = Field(ge=0)
    annual_interest_rate: Money = Field(ge=0, le=100)  # percent
    amortization_years: int = Field(gt=0, le=100)
    payment_frequency: Literal["MONTHLY", "FORTNIGHTLY", "WEEKLY"] = "MONTHLY"


class MortgageResult(FrozenModel):
    loan_amount: Money
    lmi_premium: Money
    total_mortgage: Money
    monthly_payment: Money
    total_interest_paid: Money
    total_paid: Money
    stamp_duty: Money
    amortization_schedule: list[AmortizationScheduleItem]
    other_fees: OtherFees


def calculate(input: MortgageInput, rules: MortgageRules) -> MortgageResult:
    loan = loan_amount(input.property_price, input.down_payment)
    lvr = loan / input.property_price

    lmi = rules.lenders_mortgage_insurance
    premium = insurance_premium(
        loan,
        lvr,
        lmi.required_above_lvr,
        ((tier.max_lvr, tier.rate) for tier in lmi.premium_rates),
        ratio_name="LVR",
    )
    total_mortgage = loan + premium if lmi.premium_added_to_loan else loan

    payments_per_year = PAYMENTS_PER_YEAR[input.payment_frequency]
    total_payments = input.amortization_years * payments_per_year
    periodic_rate = simple_periodic_rate(input.annual_interest_rate, payments_per_year)

    payment = annuity_payment(total_mortgage, periodic_rate, total_payments)
    total_paid, total_interest = totals(payment, total_payments, total_mortgage)
    stamp_duty = banded_duty(input.property_price, rules.stamp_duty.brackets)

    return MortgageResult(
        loan_amount=loan,
        lmi_premium=premium,
        total_mortgage=total_mortgage,
        monthly_payment=payment,
        total_interest_paid=total_interest,
        total_paid=total_paid,
        stamp_duty=stamp_duty,
        amortization_schedule=amortization_schedule(
            total_mortgage,
            periodic_rate,
            payment,
            total_payments,
            input.amortization_years,
            payments_per_year,
        ),
        other_fees=other_fees(
            (stamp_duty, "STAMP_DUTY"),
            (ZERO, "BANK_FEES"),
            (premium, "LMI_PREMIUM"),
        ),
    )
