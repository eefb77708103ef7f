"""Canada mortgage: CMHC insurance, semi-annual compounding, B-20 stress test."""

from decimal import Decimal
from typing import Literal

from pydantic import Field

from src.calculators.amortization import (
    SEMI_ANNUAL,
    ZERO,
    amortization_schedule,
    annuity_payment,
    canadian_periodic_rate,
)
from src.calculators.errors import ConfigurationError
from src.calculators.mortgage.common import insurance_premium, loan_amount, totals
from src.calculators.types import AmortizationScheduleItem, FrozenModel, Money, OtherFees, other_fees

PaymentFrequency = Literal["MONTHLY", "BI_WEEKLY", "ACCELERATED_BI_WEEKLY"]


class MinDownPayment(FrozenModel):
    up_to_500k: Money
    above_500k: Money


class LoanConstraints(FrozenModel):
    """Published lending limits. Informational only; calculate() does not enforce them."""

    max_amortization_years: int
    insured_max_amortization_years: int
    min_down_payment: MinDownPayment


class PremiumRate(FrozenModel):
    max_ltv: Money
    rate: Money


class MortgageInsuranceRules(FrozenModel):
    required_below_ltv: Money
    premium_rates: list[PremiumRate]
    premium_added_to_loan: bool


class InterestRules(FrozenModel):
    compounding: str = SEMI_ANNUAL
    conversion_formula: str = "CANADA_STANDARD"  # not read; compounding selects the formula


class PaymentFrequencyRule(FrozenModel):
    payments_per_year: int
    acceleration: bool = False  # not read; accelerated payments use payments_per_year as is


class StressTestRules(FrozenModel):
    apply: bool
    minimum_rate_buffer: Money  # percentage points
    minimum_qualifying_rate: Money  # percent


class MortgageRules(FrozenModel):
    loan_constraints: LoanConstraints | None = None
    mortgage_insurance: MortgageInsuranceRules
    interest: InterestRules = InterestRules()
    payment_frequency_rules: dict[str, PaymentFrequencyRule]
    stress_test: StressTestRules | None = None


class MortgageInput(FrozenModel):
    property_price: Money = Field(gt=0)
    down_payment: Money = Field(ge=0)
    interest_rate: Money = Field(ge=0, le=100)  # annual nominal percent, e.g. 5.2
    amortization_years: int = Field(gt=0, le=100)
    payment_frequency: PaymentFrequency = "MONTHLY"


class MortgageResult(FrozenModel):
    loan_amount: Money
    insurance_premium: Money
    total_mortgage: Money
    monthly_payment: Money  # per-period payment at the chosen frequency
    total_interest_paid: Money
    total_paid: Money
    qualifying_rate: Money | None = None
    qualifying_payment: Money | None = None
    amortization_schedule: list[AmortizationScheduleItem]
    other_fees: OtherFees


def qualifying_rate(rate_percent: Decimal, stress_test: StressTestRules) -> Decimal:
    """Rate a borrower must qualify at: contract rate plus buffer, with a floor."""
    return max(rate_percent + stress_test.minimum_rate_buffer, stress_test.minimum_qualifying_rate)


def calculate(input: MortgageInput, rules: MortgageRules) -> MortgageResult:
    """Calculate a Canadian fixed-rate mortgage.

    CMHC insurance is charged when the loan-to-value ratio is above
    ``required_below_ltv`` and may be added to the mortgage. The quoted rate
    is compounded semi-annually and converted to the payment period.

    Raises:
        InvalidInputError: If the down payment covers the whole price.
        CoverageError: If the LTV is above every premium tier.
        ConfigurationError: If the payment frequency has no rule.
        UnsupportedCompoundingError: If the rules use another compounding mode.
    """
    loan = loan_amount(input.property_price, input.down_payment)
    ltv = loan / input.property_price

    insurance = rules.mortgage_insurance
    premium = insurance_premium(
        loan,
        ltv,
        insurance.required_below_ltv,
        ((tier.max_ltv, tier.rate) for tier in insurance.premium_rates),
        ratio_name="LTV",
    )
    total_mortgage = loan + premium if insurance.premium_added_to_loan else loan

    frequency = rules.payment_frequency_rules.get(input.payment_frequency)
    if frequency is None:
        raise ConfigurationError(f"No payment frequency rule for {input.payment_frequency}")
    payments_per_year = frequency.payments_per_year
    total_payments = input.amortization_years * payments_per_year

    periodic_rate = canadian_periodic_rate(
        input.interest_rate / 100,
        rules.interest.compounding,
        payments_per_year,
    )
    payment = annuity_payment(total_mortgage, periodic_rate, total_payments)
    total_paid, total_interest = totals(payment, total_payments, total_mortgage)

    stressed_rate = None
    stressed_payment = None
    if rules.stress_test is not None and rules.stress_test.apply:
        stressed_rate = qualifying_rate(input.interest_rate, rules.stress_test)
        stressed_periodic = canadian_periodic_rate(
            stressed_rate / 100,
            rules.interest.compounding,
            payments_per_year,
        )
        stressed_payment = annuity_payment(total_mortgage, stressed_periodic, total_payments)

    schedule = amortization_schedule(
        total_mortgage,
        periodic_rate,
        payment,
        total_payments,
        input.amortization_years,
        payments_per_year,
    )

    return MortgageResult(
        loan_amount=loan,
        insurance_premium=premium,
        total_mortgage=total_mortgage,
        monthly_payment=payment,
        total_interest_paid=total_interest,
        total_paid=total_paid,
        qualifying_rate=stressed_rate,
        qualifying_payment=stressed_payment,
        amortization_schedule=schedule,
        other_fees=other_fees(
            (ZERO, "NOTARY_FEES"),
            (ZERO, "BANK_FEES"),
            (premium, "INSURANCE_PREMIUM"),
        ),
    )
