"""Calculator registry: maps (calculator kind, country) to models and functions.

Callers go through run_calculation() so that input validation, rule loading
and error wrapping happen in one place. The calculators themselves stay pure.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, NamedTuple

from pydantic import BaseModel, ValidationError

from config.settings import settings
from src.calculators.corporate import australia as corporate_australia
from src.calculators.corporate import canada as corporate_canada
from src.calculators.corporate import france as corporate_france
from src.calculators.corporate import south_africa as corporate_south_africa
from src.calculators.corporate import uk as corporate_uk
from src.calculators.errors import ConfigurationError, InvalidInputError, UnknownCalculatorError
from src.calculators.income_tax import australia as income_tax_australia
from src.calculators.income_tax import canada as income_tax_canada
from src.calculators.income_tax import france as income_tax_france
from src.calculators.income_tax import south_africa as income_tax_south_africa
from src.calculators.income_tax import uk as income_tax_uk
from src.calculators.mortgage import australia as mortgage_australia
from src.calculators.mortgage import canada as mortgage_canada
from src.calculators.mortgage import france as mortgage_france
from src.calculators.mortgage import south_africa as mortgage_south_africa
from src.calculators.mortgage import uk as mortgage_uk
from src.calculators.rules import CalculatorKind, RuleMeta, read_rule_file, rule_file_path

logger = logging.getLogger(__name__)


class CalculatorSpec(NamedTuple):
    """Input model, rules model and pure function for one calculator."""

    input_model: type[BaseModel]
    rules_model: type[BaseModel]
    calculate: Callable[[Any, Any], BaseModel]


class LoadedRules(NamedTuple):
    meta: RuleMeta
    rules: BaseModel


def _entry(module: Any, input_name: str, rules_name: str) -> CalculatorSpec:
    return CalculatorSpec(getattr(module, input_name), getattr(module, rules_name), module.calculate)


def _income_tax(module: Any) -> CalculatorSpec:
    return _entry(module, "IncomeTaxInput", "IncomeTaxRules")


def _mortgage(module: Any) -> CalculatorSpec:
    return _entry(module, "MortgageInput", "MortgageRules")


def _corporate(module: Any) -> CalculatorSpec:
    return _entry(module, "CorporateTaxInput", "CorporateTaxRules")


CALCULATORS: dict[tuple[CalculatorKind, str], CalculatorSpec] = {
    (CalculatorKind.INCOME_TAX, "canada"): _income_tax(income_tax_canada),
    (CalculatorKind.INCOME_TAX, "france"): _income_tax(income_tax_france),
    (CalculatorKind.INCOME_TAX, "south_africa"): _income_tax(income_tax_south_africa),
    (CalculatorKind.INCOME_TAX, "uk"): _income_tax(income_tax_uk),
    (CalculatorKind.INCOME_TAX, "australia"): _income_tax(income_tax_australia),
    (CalculatorKind.MORTGAGE, "canada"): _mortgage(mortgage_canada),
    (CalculatorKind.MORTGAGE, "france"): _mortgage(mortgage_france),
    (CalculatorKind.MORTGAGE, "south_africa"): _mortgage(mortgage_south_africa),
    (CalculatorKind.MORTGAGE, "uk"): _mortgage(mortgage_uk),
    (CalculatorKind.MORTGAGE, "australia"): _mortgage(mortgage_australia),
    (CalculatorKind.CORPORATE_TAX, "canada"): _corporate(corporate_canada),
    (CalculatorKind.CORPORATE_TAX, "france"): _corporate(corporate_france),
    (CalculatorKind.CORPORATE_TAX, "south_africa"): _corporate(corporate_south_africa),
    (CalculatorKind.CORPORATE_TAX, "uk"): _corporate(corporate_uk),
    (CalculatorKind.CORPORATE_TAX, "australia"): _corporate(corporate_australia),
}


def _kind(kind: CalculatorKind | str) -> CalculatorKind:
    try:
        return CalculatorKind(kind)
    except ValueError as e:
        raise UnknownCalculatorError(f"Unknown calculator: {kind}") from e


def get_calculator(kind: CalculatorKind | str, country: str) -> CalculatorSpec:
    """Look up a calculator.

    Raises:
        UnknownCalculatorError: If nothing is registered for kind/country.
    """
    key = (_kind(kind), country)
    calculator = CALCULATORS.get(key)
    if calculator is None:
        raise UnknownCalculatorError(f"Unknown calculator: {key[0].value}/{country}")
    return calculator


def load_rules(
    kind: CalculatorKind | str,
    country: str,
    rules_dir: Path | None = None,
) -> LoadedRules:
    """Load and validate the bundled rule set for a calculator.

    Raises:
        UnknownCalculatorError: If nothing is registered for kind/country.
        ConfigurationError: If the rule file is missing or invalid.
    """
    kind = _kind(kind)
    calculator = get_calculator(kind, country)
    rules_dir = rules_dir or settings.resolved_rules_dir

    rule_file = read_rule_file(kind, country, rules_dir)
    try:
        rules = calculator.rules_model.model_validate(rule_file.rules)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid rules for {kind.value}/{country}: {e}") from e

    logger.debug("Loaded rules %s (version %s)", rule_file.meta.id, rule_file.meta.version)
    return LoadedRules(meta=rule_file.meta, rules=rules)


def list_rule_sets(rules_dir: Path | None = None) -> list[RuleMeta]:
    """Metadata of every rule file present for a registered calculator."""
    rules_dir = rules_dir or settings.resolved_rules_dir
    metas: list[RuleMeta] = []

    for kind, country in CALCULATORS:
        if not rule_file_path(kind, country, rules_dir).exists():
            logger.warning("No rule file for %s/%s in %s", kind.value, country, rules_dir)
            continue
        metas.append(read_rule_file(kind, country, rules_dir).meta)

    return metas


def run_calculation(
    kind: CalculatorKind | str,
    country: str,
    input_data: dict[str, Any],
    rules_data: dict[str, Any] | None = None,
    rules_dir: Path | None = None,
) -> BaseModel:
    """Validate input, resolve rules and run one calculation.

    Args:
        kind: Calculator kind (income_tax, mortgage, corporate_tax).
        country: Country key, e.g. "uk".
        input_data: Raw input mapping for the calculator's input model.
        rules_data: Optional rules mapping; the bundled rule set is used when
            omitted.
        rules_dir: Override of the bundled rules directory.

    Raises:
        UnknownCalculatorError: If nothing is registered for kind/country.
        InvalidInputError: If input_data does not validate.
        ConfigurationError: If the rules do not validate or do not fit.
        CalculationError: Any other calculation failure.
    """
    kind = _kind(kind)
    calculator = get_calculator(kind, country)

    try:
        calc_input = calculator.input_model.model_validate(input_data)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid input for {kind.value}/{country}: {e}") from e

    if rules_data is None:
        rules = load_rules(kind, country, rules_dir).rules
    else:
        try:
            rules = calculator.rules_model.model_validate(rules_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid rules for {kind.value}/{country}: {e}") from e

    result = calculator.calculate(calc_input, rules)
    logger.info("Calculated %s/%s", kind.value, country)
    return result
