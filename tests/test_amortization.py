"""Tests for the amortization engine."""

from decimal import Decimal

import pytest

from src.calculators.amortization import (
    SEMI_ANNUAL,
    amortization_schedule,
    annuity_payment,
    annuity_principal,
    canadian_periodic_rate,
    simple_periodic_rate,
)
from src.calculators.errors import ConfigurationError, UnsupportedCompoundingError

CENT = Decimal("0.01")


class TestAnnuity:
    def test_zero_rate_is_straight_line(self) -> None:
        assert annuity_payment(Decimal("1200"), Decimal("0"), 12) == Decimal("100")

    def test_reference_payment(self) -> None:
        """100k over 30 years at 5% nominal, monthly = 536.82."""
        payment = annuity_payment(Decimal("100000"), Decimal("0.05") / 12, 360)
        assert payment.quantize(CENT) == Decimal("536.82")

    def test_principal_inverts_payment(self) -> None:
        rate = Decimal("0.004")
        payment = annuity_payment(Decimal("250000"), rate, 300)
        assert abs(annuity_principal(payment, rate, 300) - Decimal("250000")) < CENT

    def test_principal_zero_rate(self) -> None:
        assert annuity_principal(Decimal("100"), Decimal("0"), 12) == Decimal("1200")


class TestRates:
    def test_simple_periodic_rate(self) -> None:
        assert simple_periodic_rate(Decimal("6"), 12) == Decimal("0.005")

    def test_canadian_rate_compounds_to_semi_annual_effective(self) -> None:
        rate = canadian_periodic_rate(Decimal("0.06"), SEMI_ANNUAL, 12)
        effective = (1 + rate) ** 12
        assert abs(effective - Decimal("1.0609")) < Decimal("1e-12")
        assert rate < Decimal("0.005")

    def test_other_compounding_rejected(self) -> None:
        with pytest.raises(UnsupportedCompoundingError, match="semi-annual"):
            canadian_periodic_rate(Decimal("0.06"), "MONTHLY", 12)

    def test_compounding_error_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            canadian_periodic_rate(Decimal("0.06"), "ANNUAL", 12)


class TestSchedule:
    def test_zero_rate_single_year(self) -> None:
        schedule = amortization_schedule(Decimal("1200"), Decimal("0"), Decimal("100"), 12, 1, 12)
        assert len(schedule) == 1
        assert schedule[0].principal == Decimal("1200")
        assert schedule[0].interest == 0
        assert schedule[0].balance == 0

    def test_partial_final_year(self) -> None:
        schedule = amortization_schedule(Decimal("1800"), Decimal("0"), Decimal("100"), 18, 2, 12)
        assert [item.principal for item in schedule] == [Decimal("1200"), Decimal("600")]
        assert schedule[-1].balance == 0

    def test_stops_once_paid_off(self) -> None:
        schedule = amortization_schedule(Decimal("1200"), Decimal("0"), Decimal("100"), 12, 3, 12)
        assert len(schedule) == 1

    def test_thirty_year_loan(self) -> None:
        rate = Decimal("0.05") / 12
        payment = annuity_payment(Decimal("100000"), rate, 360)
        schedule = amortization_schedule(Decimal("100000"), rate, payment, 360, 30, 12)

        assert len(schedule) == 30
        assert [item.year for item in schedule] == list(range(1, 31))
        balances = [item.balance for item in schedule]
        assert balances == sorted(balances, reverse=True)
        assert schedule[-1].balance < CENT
        assert abs(sum(item.principal for item in schedule) - Decimal("100000")) < CENT
        # Interest front-loaded
        assert schedule[0].interest > schedule[-1].interest
