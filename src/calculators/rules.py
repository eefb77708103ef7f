"""Rule set files: metadata header plus the calculator-specific rules block."""

from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple

from pydantic import ValidationError

from config import load_yaml_config
from src.calculators.errors import ConfigurationError
from src.calculators.types import FrozenModel


class CalculatorKind(str, Enum):
    INCOME_TAX = "income_tax"
    MORTGAGE = "mortgage"
    CORPORATE_TAX = "corporate_tax"


class RuleSource(FrozenModel):
    name: str
    url: str


class RuleMeta(FrozenModel):
    """Where a rule set comes from and the period it covers."""

    id: str
    country: str
    region: str | None = None
    calculator: CalculatorKind
    version: str
    effective_from: date
    effective_to: date | None = None
    sources: list[RuleSource] = []


class RuleFile(NamedTuple):
    meta: RuleMeta
    rules: dict[str, Any]


def rule_file_path(kind: CalculatorKind, country: str, rules_dir: Path) -> Path:
    return rules_dir / kind.value / f"{country}.yaml"


def read_rule_file(kind: CalculatorKind, country: str, rules_dir: Path) -> RuleFile:
    """Read a rule file and validate its meta block.

    The rules block is returned raw; the calculator's rules model validates it.

    Raises:
        ConfigurationError: If the file is missing, is not a mapping, or its
            meta block is invalid.
    """
    filename = f"{kind.value}/{country}.yaml"
    try:
        raw = load_yaml_config(filename, base_dir=rules_dir)
    except FileNotFoundError as e:
        raise ConfigurationError(f"No rule set for {kind.value}/{country}") from e

    if not isinstance(raw, dict) or "meta" not in raw or "rules" not in raw:
        raise ConfigurationError(f"Rule file {filename} needs 'meta' and 'rules' blocks")

    try:
        meta = RuleMeta.model_validate(raw["meta"])
    except ValidationError as e:
        raise ConfigurationError(f"Invalid meta in {filename}: {e}") from e

    return RuleFile(meta=meta, rules=raw["rules"])
