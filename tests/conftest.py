"""Shared test fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from config import CONFIG_DIR
from src.calculators.registry import load_rules

RULES_DIR = CONFIG_DIR / "rules"


@pytest.fixture
def bundled_rules() -> Callable[[str, str], Any]:
    """Loader for the validated rules block of a bundled rule set."""

    def _load(kind: str, country: str) -> Any:
        return load_rules(kind, country, RULES_DIR).rules

    return _load
