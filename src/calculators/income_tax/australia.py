"""Australia income tax with LITO/LMITO offsets and the Medicare levy."""

from decimal import Decimal

from pydantic import Field

from src.calculators import rounding
from src.calculators.brackets import ZERO, allocate
from src.calculators.types import BracketAllocation, FrozenModel, Money, TaxBracket


class MedicareLevyRules(FrozenModel):
    rate: Money
    shading_in_threshold: Money
    full_levy_threshold: Money
    reduction_rate: Money


class TaxOffset(FrozenModel):
    """An offset that phases out linearly between two income thresholds."""

    max_offset: Money
    phase_out_start: Money
    phase_out_end: Money
    phase_out_rate: Money


class IncomeTaxRules(FrozenModel):
    tax_brackets: list[TaxBracket]
    non_resident_tax_brackets: list[TaxBracket] | None = None
    medicare_levy: MedicareLevyRules
    low_income_tax_offset: TaxOffset
    low_and_middle_income_tax_offset: TaxOffset | None = None


class IncomeTaxInput(FrozenModel):
    income: Money = Field(ge=0)
    is_resident: bool = True
    include_medicare_levy: bool = True


class IncomeTaxResult(FrozenModel):
    gross_income: Money
    income_tax: Money
    medicare_levy: Money
    low_income_tax_offset: Money
    low_and_middle_income_tax_offset: Money = ZERO
    total_deductions: Money
    net_income: Money
    effective_tax_rate: Money
    tax_bracket_breakdown: list[BracketAllocation]


def phased_offset(income: Decimal, offset: TaxOffset | None) -> Decimal:
    if offset is None:
        return ZERO

    if income <= offset.phase_out_start:
        return offset.max_offset

    if income >= offset.phase_out_end:
        return ZERO

    reduction = (income - offset.phase_out_start) * offset.phase_out_rate
    return max(ZERO, offset.max_offset - reduction)


def medicare_levy(income: Decimal, rules: MedicareLevyRules) -> Decimal:
    """Levy with a shading-in band between the low-income and full thresholds."""
    if income <= rules.shading_in_threshold:
        return ZERO

    if income <= rules.full_levy_threshold:
        return (income - rules.shading_in_threshold) * rules.reduction_rate

    return income * rules.rate


def calculate_net_income(
    income: Decimal,
    rules: IncomeTaxRules,
    is_resident: bool = True,
    include_medicare_levy: bool = True,
) -> IncomeTaxResult:
    """Calculate Australian net income after income tax and Medicare levy.

    Non-residents are taxed on the non-resident scale (when the rules carry
    one) and get neither the offsets nor the Medicare levy.
    """
    policy = rounding.AUSTRALIA

    if is_resident or not rules.non_resident_tax_brackets:
        tax_brackets = rules.tax_brackets
    else:
        tax_brackets = rules.non_resident_tax_brackets
    brackets = allocate(income, tax_brackets)

    lito = phased_offset(income, rules.low_income_tax_offset) if is_resident else ZERO
    lmito = phased_offset(income, rules.low_and_middle_income_tax_offset) if is_resident else ZERO

    income_tax = max(ZERO, brackets.total_tax - lito - lmito)
    levy = (
        medicare_levy(income, rules.medicare_levy)
        if is_resident and include_medicare_levy
        else ZERO
    )
    total_deductions = income_tax + levy

    return IncomeTaxResult(
        gross_income=income,
        income_tax=policy.money(income_tax),
        medicare_levy=policy.money(levy),
        low_income_tax_offset=policy.money(lito),
        low_and_middle_income_tax_offset=policy.money(lmito),
        total_deductions=policy.money(total_deductions),
        net_income=policy.money(income - total_deductions),
        effective_tax_rate=policy.rate(income_tax / income) if income > 0 else ZERO,
        tax_bracket_breakdown=brackets.allocations,
    )


def calculate(input: IncomeTaxInput, rules: IncomeTaxRules) -> IncomeTaxResult:
    return calculate_net_income(
        input.income,
        rules,
        is_resident=input.is_resident,
        include_medicare_levy=input.include_medicare_levy,
    )
