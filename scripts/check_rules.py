"""Load and validate every bundled rule set against its calculator's rules model."""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings
from src.calculators.errors import ConfigurationError
from src.calculators.registry import CALCULATORS, load_rules

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main() -> int:
    """Validate each rule file; return a non-zero exit code on any failure."""
    rules_dir = settings.resolved_rules_dir
    failed = 0

    for kind, country in CALCULATORS:
        try:
            loaded = load_rules(kind, country, rules_dir)
        except ConfigurationError as e:
            failed += 1
            logger.error("%s/%s: %s", kind.value, country, e)
            continue
        logger.info(
            "%s/%s: %s version %s (from %s)",
            kind.value,
            country,
            loaded.meta.id,
            loaded.meta.version,
            loaded.meta.effective_from,
        )

    logger.info("Checked %d rule sets in %s, %d failed", len(CALCULATORS), rules_dir, failed)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
