"""Per-jurisdiction rounding policies."""

from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple


class RoundingPolicy(NamedTuple):
    """Decimal places for money and for rates, plus the rounding mode."""

    money_places: int
    rate_places: int
    rounding: str = ROUND_HALF_UP

    def money(self, value: Decimal) -> Decimal:
        return value.quantize(Decimal(1).scaleb(-self.money_places), rounding=self.rounding)

    def rate(self, value: Decimal) -> Decimal:
        return value.quantize(Decimal(1).scaleb(-self.rate_places), rounding=self.rounding)


CANADA = RoundingPolicy(money_places=2, rate_places=2)
FRANCE = RoundingPolicy(money_places=2, rate_places=2)
SOUTH_AFRICA = RoundingPolicy(money_places=2, rate_places=4)
UK = RoundingPolicy(money_places=2, rate_places=4)
AUSTRALIA = RoundingPolicy(money_places=2, rate_places=4)
