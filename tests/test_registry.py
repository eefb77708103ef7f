"""Tests for the calculator registry and bundled rule sets."""

from decimal import Decimal
from pathlib import Path

import pytest

from config import CONFIG_DIR
from src.calculators.errors import (
    ConfigurationError,
    InvalidInputError,
    RegimeNotApplicableError,
    UnknownCalculatorError,
)
from src.calculators.income_tax import uk as income_tax_uk
from src.calculators.registry import (
    CALCULATORS,
    get_calculator,
    list_rule_sets,
    load_rules,
    run_calculation,
)
from src.calculators.rules import CalculatorKind

RULES_DIR = CONFIG_DIR / "rules"


class TestGetCalculator:
    def test_lookup_by_string(self) -> None:
        calculator = get_calculator("income_tax", "uk")
        assert calculator.input_model is income_tax_uk.IncomeTaxInput
        assert calculator.rules_model is income_tax_uk.IncomeTaxRules

    def test_every_kind_covers_every_country(self) -> None:
        assert len(CALCULATORS) == 15
        for kind in CalculatorKind:
            for country in ("canada", "france", "south_africa", "uk", "australia"):
                assert (kind, country) in CALCULATORS

    def test_unknown_country(self) -> None:
        with pytest.raises(UnknownCalculatorError, match="income_tax/narnia"):
            get_calculator("income_tax", "narnia")

    def test_unknown_kind(self) -> None:
        with pytest.raises(UnknownCalculatorError, match="payroll"):
            get_calculator("payroll", "uk")

    def test_unknown_calculator_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            get_calculator("payroll", "uk")


class TestLoadRules:
    @pytest.mark.parametrize(("kind", "country"), list(CALCULATORS))
    def test_bundled_rule_set_validates(self, kind: CalculatorKind, country: str) -> None:
        loaded = load_rules(kind, country, RULES_DIR)
        assert loaded.meta.calculator == kind
        assert loaded.meta.country == country
        assert isinstance(loaded.rules, CALCULATORS[(kind, country)].rules_model)

    def test_missing_rule_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="No rule set"):
            load_rules("income_tax", "uk", tmp_path)

    def test_missing_meta_block(self, tmp_path: Path) -> None:
        (tmp_path / "income_tax").mkdir()
        (tmp_path / "income_tax" / "uk.yaml").write_text("rules: {}\n")
        with pytest.raises(ConfigurationError, match="'meta' and 'rules'"):
            load_rules("income_tax", "uk", tmp_path)

    def test_invalid_rules_block(self, tmp_path: Path) -> None:
        (tmp_path / "income_tax").mkdir()
        (tmp_path / "income_tax" / "uk.yaml").write_text(
            "meta:\n"
            "  id: test\n"
            "  country: uk\n"
            "  calculator: income_tax\n"
            "  version: '1'\n"
            "  effective_from: 2024-04-06\n"
            "rules:\n"
            "  tax_brackets: []\n"
        )
        with pytest.raises(ConfigurationError, match="Invalid rules"):
            load_rules("income_tax", "uk", tmp_path)

    def test_list_rule_sets(self) -> None:
        metas = list_rule_sets(RULES_DIR)
        assert len(metas) == 15
        assert len({meta.id for meta in metas}) == 15

    def test_list_rule_sets_skips_missing_files(self, tmp_path: Path) -> None:
        assert list_rule_sets(tmp_path) == []


class TestRunCalculation:
    def test_bundled_rules(self) -> None:
        result = run_calculation("income_tax", "uk", {"income": 60000}, rules_dir=RULES_DIR)
        assert result.income_tax == Decimal("11432.00")

    def test_float_input_converted_exactly(self) -> None:
        result = run_calculation("corporate_tax", "uk", {"taxable_income": 0.1}, rules_dir=RULES_DIR)
        assert result.corporate_tax == Decimal("0.019")

    def test_negative_income_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            run_calculation("income_tax", "uk", {"income": -1}, rules_dir=RULES_DIR)

    def test_unknown_input_field_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            run_calculation("income_tax", "uk", {"income": 1000, "bonus": 5}, rules_dir=RULES_DIR)

    def test_rules_override(self) -> None:
        rules = {
            "regimes": {
                "general": {"type": "flat", "rate": 0.2},
                "small_business": {"type": "flat", "rate": 0.1},
            }
        }
        result = run_calculation(
            "corporate_tax",
            "canada",
            {"taxable_income": 1000, "is_small_business": False},
            rules_data=rules,
        )
        assert result.corporate_tax == Decimal("200.0")

    def test_invalid_rules_override(self) -> None:
        with pytest.raises(ConfigurationError):
            run_calculation("income_tax", "uk", {"income": 1000}, rules_data={"tax_brackets": "nope"})

    def test_calculation_errors_propagate(self) -> None:
        with pytest.raises(RegimeNotApplicableError):
            run_calculation(
                "corporate_tax",
                "australia",
                {"taxable_income": 1000, "annual_turnover": 60000000, "is_small_business": True},
                rules_dir=RULES_DIR,
            )

    def test_unknown_south_africa_regime_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown tax regime: BOGUS"):
            run_calculation(
                "corporate_tax",
                "south_africa",
                {"taxable_income": 1000, "regime": "BOGUS"},
                rules_dir=RULES_DIR,
            )

    def test_south_africa_regime_defined_by_rules(self) -> None:
        result = run_calculation(
            "corporate_tax",
            "south_africa",
            {"taxable_income": 1000, "regime": "MICRO"},
            rules_data={"regimes": {"MICRO": {"type": "flat", "rate": 0.1}}},
        )
        assert result.corporate_tax == Decimal("100.0")

    def test_interest_rate_above_bound_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="interest_rate"):
            run_calculation(
                "mortgage",
                "canada",
                {
                    "property_price": 600000,
                    "down_payment": 120000,
                    "interest_rate": 150,
                    "amortization_years": 25,
                },
                rules_dir=RULES_DIR,
            )


SAMPLE_INPUTS: dict[tuple[str, str], dict] = {
    ("income_tax", "canada"): {"income": 85000},
    ("income_tax", "france"): {"income": 85000, "family_parts": 2.5},
    ("income_tax", "south_africa"): {"income": 850000, "age": 67, "medical_aid_members": 2},
    ("income_tax", "uk"): {"income": 120000},
    ("income_tax", "australia"): {"income": 85000},
    ("corporate_tax", "canada"): {"taxable_income": 750000, "is_small_business": True},
    ("corporate_tax", "france"): {
        "taxable_income": 120000,
        "annual_turnover": 5000000,
        "is_small_business": True,
    },
    ("corporate_tax", "south_africa"): {"taxable_income": 600000, "regime": "SBC"},
    ("corporate_tax", "uk"): {"taxable_income": 150000},
    ("corporate_tax", "australia"): {
        "taxable_income": 400000,
        "annual_turnover": 10000000,
        "is_small_business": True,
    },
    ("mortgage", "canada"): {
        "property_price": 600000,
        "down_payment": 60000,
        "interest_rate": 5,
        "amortization_years": 25,
        "payment_frequency": "BI_WEEKLY",
    },
    ("mortgage", "france"): {
        "property_price": 300000,
        "down_payment": 30000,
        "net_monthly_income": 5000,
        "annual_interest_rate": 3.5,
    },
    ("mortgage", "south_africa"): {
        "property_price": 2000000,
        "down_payment": 200000,
        "annual_interest_rate": 11.75,
        "amortization_years": 20,
        "gross_monthly_income": 60000,
    },
    ("mortgage", "uk"): {
        "property_price": 350000,
        "down_payment": 35000,
        "annual_interest_rate": 4.5,
        "amortization_years": 25,
    },
    ("mortgage", "australia"): {
        "property_price": 800000,
        "down_payment": 80000,
        "annual_interest_rate": 6,
        "amortization_years": 30,
    },
}


@pytest.mark.parametrize(("kind", "country"), list(CALCULATORS))
def test_repeated_calculation_gives_identical_result(kind: CalculatorKind, country: str) -> None:
    input_data = SAMPLE_INPUTS[(kind.value, country)]
    first = run_calculation(kind, country, input_data, rules_dir=RULES_DIR)
    second = run_calculation(kind, country, input_data, rules_dir=RULES_DIR)
    assert first == second
    assert first.model_dump(mode="json") == second.model_dump(mode="json")


def test_check_rules_script_passes() -> None:
    from scripts.check_rules import main

    assert main() == 0
