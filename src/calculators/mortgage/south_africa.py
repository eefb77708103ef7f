"""South Africa home loan (bond) with affordability, transfer duty and registration fees."""

from typing import Literal

from pydantic import Field

from src.calculators.amortization import (
    ZERO,
    amortization_schedule,
    annuity_payment,
    simple_periodic_rate,
)
from src.calculators.brackets import DutyBand, banded_duty
from src.calculators.errors import InvalidInputError
from src.calculators.mortgage.common import loan_amount, totals
from src.calculators.types import AmortizationScheduleItem, FrozenModel, Money, OtherFees, other_fees

MONTHS = 12


class LoanConstraints(FrozenModel):
    """Only max_debt_to_income_percent is read; the other limits are informational."""

    max_ltv: Money | None = None
    min_down_payment_percent: Money | None = None
    max_amortization_years: int | None = None
    max_debt_to_income_percent: Money


class RateRange(FrozenModel):
    min: Money
    max: Money


class InterestRules(FrozenModel):
    """Published rate context. Not read; the input rate is used as given."""

    type: Literal["fixed", "variable"] = "variable"
    rate_range_percent: RateRange | None = None
    stress_test_buffer_percent: Money = ZERO


class InsuranceRules(FrozenModel):
    """Not read; no insurance premium is added to South African bonds."""

    required: bool = False


class TransferDuty(FrozenModel):
    brackets: list[DutyBand]


class FeesRules(FrozenModel):
    bond_registration_percent: Money
    transfer_duty: TransferDuty


class MortgageRules(FrozenModel):
    loan_constraints: LoanConstraints
    interest: InterestRules = InterestRules()
    insurance: InsuranceRules = InsuranceRules()
    fees: FeesRules


class MortgageInput(FrozenModel):
    property_price: Money = Field(gt=0)
    down_payment: Money = Field(ge=0)
    annual_interest_rate: Money = Field(ge=0, le=100)  # percent, e.g. 11.75
    amortization_years: int = Field(gt=0, le=100)
    gross_monthly_income: Money


class MortgageResult(FrozenModel):
    loan_amount: Money
    monthly_payment: Money
    total_interest_paid: Money
    total_paid: Money
    debt_to_income_ratio: Money  # percentage, 0-100
    is_affordable: bool
    transfer_duty: Money
    bond_registration_fee: Money
    amortization_schedule: list[AmortizationScheduleItem]
    other_fees: OtherFees


def calculate(input: MortgageInput, rules: MortgageRules) -> MortgageResult:
    """Calculate a monthly bond repayment and its affordability.

    Affordability is advisory: an unaffordable loan is still calculated and
    flagged with ``is_affordable=False``.

    Raises:
        InvalidInputError: If the loan is not positive or the gross monthly
            income is not positive.
    """
    loan = loan_amount(input.property_price, input.down_payment)
    if input.gross_monthly_income <= 0:
        raise InvalidInputError("Gross monthly income must be positive")

    total_payments = input.amortization_years * MONTHS
    monthly_rate = simple_periodic_rate(input.annual_interest_rate, MONTHS)

    payment = annuity_payment(loan, monthly_rate, total_payments)
    total_paid, total_interest = totals(payment, total_payments, loan)

    debt_to_income = payment / input.gross_monthly_income * 100
    is_affordable = debt_to_income <= rules.loan_constraints.max_debt_to_income_percent

    bond_registration = loan * (rules.fees.bond_registration_percent / 100)
    transfer_duty = banded_duty(input.property_price, rules.fees.transfer_duty.brackets)

    return MortgageResult(
        loan_amount=loan,
        monthly_payment=payment,
        total_interest_paid=total_interest,
        total_paid=total_paid,
        debt_to_income_ratio=debt_to_income,
        is_affordable=is_affordable,
        transfer_duty=transfer_duty,
        bond_registration_fee=bond_registration,
        amortization_schedule=amortization_schedule(
            loan, monthly_rate, payment, total_payments, input.amortization_years, MONTHS
        ),
        other_fees=other_fees(
            (bond_registration, "BOND_REGISTRATION_FEES"),
            (transfer_duty, "TRANSFER_DUTY"),
            (ZERO, "MONTHLY_INSURANCE_FEES"),
        ),
    )
