"""France home loan: HCSF debt-ratio affordability, notary fees and borrower insurance."""

from decimal import Decimal

from pydantic import Field

from src.calculators.amortization import (
    ZERO,
    amortization_schedule,
    annuity_payment,
    annuity_principal,
    simple_periodic_rate,
)
from src.calculators.types import AmortizationScheduleItem, FrozenModel, Money, OtherFees, other_fees

MONTHS = 12


class FirstTimeBuyerRules(FrozenModel):
    enabled: bool
    max_debt_ratio: Money
    max_loan_duration_years: int
    quota_disclaimer: str = ""  # display text, not read
    requires_primary_residence: bool = True


class InsuranceRules(FrozenModel):
    average_rate: Money  # yearly, on the borrowed amount
    included_in_debt_ratio: bool


class FeesRules(FrozenModel):
    notary_rate_old_property: Money
    notary_rate_new_property: Money
    bank_fees_rate: Money


class StressTestRules(FrozenModel):
    interest_rate_buffer: Money  # percentage points


class MortgageRules(FrozenModel):
    max_debt_ratio: Money
    max_loan_duration_years: int
    max_loan_duration_new_build_years: int
    min_down_payment_rate: Money
    first_time_buyer: FirstTimeBuyerRules | None = None
    insurance: InsuranceRules
    fees: FeesRules
    stress_test: StressTestRules


class MortgageInput(FrozenModel):
    property_price: Money = Field(gt=0)
    down_payment: Money = Field(ge=0)
    net_monthly_income: Money = Field(ge=0)
    annual_interest_rate: Money = Field(ge=0, le=100)  # percent
    is_primary_residence: bool = True
    is_first_time_buyer: bool = False
    is_new_build: bool = False


class MortgageResult(FrozenModel):
    loan_amount: Money
    total_paid: Money
    total_interest_paid: Money
    monthly_payment: Money
    required_loan_amount: Money
    max_monthly_payment: Money
    max_loan_amount: Money
    total_project_cost: Money
    loan_duration_years: int
    debt_ratio: Money
    monthly_insurance_cost: Money
    is_eligible: bool
    amortization_schedule: list[AmortizationScheduleItem]
    other_fees: OtherFees


def ineligible_result(input: MortgageInput) -> MortgageResult:
    return MortgageResult(
        loan_amount=ZERO,
        total_paid=ZERO,
        total_interest_paid=ZERO,
        monthly_payment=ZERO,
        required_loan_amount=input.property_price - input.down_payment,
        max_monthly_payment=ZERO,
        max_loan_amount=ZERO,
        total_project_cost=input.property_price,
        loan_duration_years=0,
        debt_ratio=ZERO,
        monthly_insurance_cost=ZERO,
        is_eligible=False,
        amortization_schedule=[],
        other_fees=other_fees(
            (ZERO, "NOTARY_FEES"),
            (ZERO, "BANK_FEES"),
            (ZERO, "MONTHLY_INSURANCE_FEES"),
        ),
    )


def _programme(input: MortgageInput, rules: MortgageRules) -> tuple[Decimal, int]:
    """(max debt ratio, loan duration) for the applicable lending programme."""
    ftb = rules.first_time_buyer
    if input.is_first_time_buyer and ftb is not None and ftb.enabled:
        return ftb.max_debt_ratio, ftb.max_loan_duration_years
    if input.is_new_build:
        return rules.max_debt_ratio, rules.max_loan_duration_new_build_years
    return rules.max_debt_ratio, rules.max_loan_duration_years


def is_soft_ineligible(input: MortgageInput, rules: MortgageRules) -> bool:
    """Conditions that yield an all-zero result instead of an error."""
    ftb = rules.first_time_buyer
    if (
        input.is_first_time_buyer
        and ftb is not None
        and ftb.requires_primary_residence
        and not input.is_primary_residence
    ):
        return True
    return input.down_payment < input.property_price * rules.min_down_payment_rate


def calculate(input: MortgageInput, rules: MortgageRules) -> MortgageResult:
    """Check a French home loan against the debt-ratio ceiling.

    The maximum affordable loan is the inverse annuity of the maximum monthly
    payment at the stressed rate; the actual payment and schedule use the
    quoted rate. ``is_eligible`` compares the two loan amounts. A first-time
    buyer not buying a primary residence, or a down payment under the
    minimum, returns ``ineligible_result`` rather than raising.
    """
    if is_soft_ineligible(input, rules):
        return ineligible_result(input)

    debt_ratio, duration_years = _programme(input, rules)
    total_payments = duration_years * MONTHS

    notary_rate = (
        rules.fees.notary_rate_new_property if input.is_new_build else rules.fees.notary_rate_old_property
    )
    notary_fees = input.property_price * notary_rate
    bank_fees = input.property_price * rules.fees.bank_fees_rate
    total_project_cost = input.property_price + notary_fees + bank_fees
    required_loan = total_project_cost - input.down_payment

    monthly_insurance = required_loan * rules.insurance.average_rate / MONTHS

    max_monthly_payment = input.net_monthly_income * debt_ratio
    if rules.insurance.included_in_debt_ratio:
        max_monthly_payment -= monthly_insurance

    stressed_rate = simple_periodic_rate(
        input.annual_interest_rate + rules.stress_test.interest_rate_buffer, MONTHS
    )
    max_loan = annuity_principal(max_monthly_payment, stressed_rate, total_payments)

    monthly_rate = simple_periodic_rate(input.annual_interest_rate, MONTHS)
    monthly_payment = annuity_payment(required_loan, monthly_rate, total_payments)
    total_paid = monthly_payment * total_payments

    if monthly_rate == 0 or required_loan <= 0 or monthly_payment <= 0:
        schedule = []
    else:
        schedule = amortization_schedule(
            required_loan, monthly_rate, monthly_payment, total_payments, duration_years, MONTHS
        )

    return MortgageResult(
        loan_amount=required_loan,
        total_paid=total_paid,
        total_interest_paid=total_paid - required_loan,
        monthly_payment=monthly_payment,
        required_loan_amount=required_loan,
        max_monthly_payment=max_monthly_payment,
        max_loan_amount=max_loan,
        total_project_cost=total_project_cost,
        loan_duration_years=duration_years,
        debt_ratio=debt_ratio,
        monthly_insurance_cost=monthly_insurance,
        is_eligible=max_loan >= required_loan,
        amortization_schedule=schedule,
        other_fees=other_fees(
            (notary_fees, "NOTARY_FEES"),
            (bank_fees, "BANK_FEES"),
            (monthly_insurance, "MONTHLY_INSURANCE_FEES"),
        ),
    )
