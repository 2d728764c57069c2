"""Tests for total quantity calculation."""

import math

import pytest

from ndc_calculator.models import Failure, FailureKind, FormCategory, ParsedDose
from ndc_calculator.transformers.quantity_calculator import calculate_total_quantity


class TestDiscreteForms:
    """Tablets, capsules and other forms round up."""

    def test_tablet_twice_daily_thirty_days(self):
        dose = ParsedDose(quantity=1, frequency=2, unit='tablet')
        assert calculate_total_quantity(dose, 30, FormCategory.TABLET) == 60

    def test_half_tablet_rounds_up(self):
        dose = ParsedDose(quantity=0.5, frequency=1, unit='tablet')
        assert calculate_total_quantity(dose, 7, FormCategory.TABLET) == 4

    def test_every_other_day(self):
        dose = ParsedDose(quantity=1, frequency=0.5, unit='capsule')
        assert calculate_total_quantity(dose, 15, FormCategory.CAPSULE) == 8

    @pytest.mark.parametrize("quantity, frequency, days", [
        (1, 1, 1),
        (1.5, 3, 7),
        (2, 4, 30),
        (0.25, 2, 9),
        (3, 0.5, 11),
    ])
    def test_smallest_integer_not_below_product(self, quantity, frequency, days):
        dose = ParsedDose(quantity=quantity, frequency=frequency, unit='tablet')
        for category in (FormCategory.TABLET, FormCategory.CAPSULE, FormCategory.OTHER):
            assert calculate_total_quantity(dose, days, category) == math.ceil(
                quantity * frequency * days
            )

    def test_float_noise_does_not_round_up(self):
        """0.1 x 3 x 10 is 3, not 4."""
        dose = ParsedDose(quantity=0.1, frequency=3, unit='ml')
        assert calculate_total_quantity(dose, 10, FormCategory.OTHER) == 3

    def test_inhaler_rounds_up(self):
        dose = ParsedDose(quantity=2, frequency=0.5, unit='dose')
        assert calculate_total_quantity(dose, 5, FormCategory.INHALER) == 5


class TestInsulin:
    """Insulin rounds to the nearest whole unit."""

    def test_rounds_down(self):
        dose = ParsedDose(quantity=10.2, frequency=1, unit='unit')
        assert calculate_total_quantity(dose, 1, FormCategory.INSULIN) == 10

    def test_rounds_up(self):
        dose = ParsedDose(quantity=10.7, frequency=1, unit='unit')
        assert calculate_total_quantity(dose, 1, FormCategory.INSULIN) == 11

    def test_ties_to_even(self):
        dose = ParsedDose(quantity=2.5, frequency=1, unit='unit')
        assert calculate_total_quantity(dose, 1, FormCategory.INSULIN) == 2

    def test_within_half_unit(self):
        dose = ParsedDose(quantity=7.3, frequency=3, unit='unit')
        total = calculate_total_quantity(dose, 30, FormCategory.INSULIN)
        assert isinstance(total, int)
        assert abs(total - 7.3 * 3 * 30) <= 0.5


class TestLiquid:
    """Liquids: two decimals, then up to a whole ml."""

    def test_five_ml_every_eight_hours(self):
        dose = ParsedDose(quantity=5, frequency=3, unit='ml')
        assert calculate_total_quantity(dose, 5, FormCategory.LIQUID) == 75

    def test_fractional_volume_rounds_up(self):
        dose = ParsedDose(quantity=2.5, frequency=3, unit='ml')
        assert calculate_total_quantity(dose, 7, FormCategory.LIQUID) == 53

    def test_rounded_to_two_decimals_before_ceiling(self):
        """52.501 rounds to 52.5 before the ceiling."""
        dose = ParsedDose(quantity=52.501, frequency=1, unit='ml')
        assert calculate_total_quantity(dose, 1, FormCategory.LIQUID) == 53

    def test_third_decimal_below_rounding(self):
        """10.004 is 10.00 at two decimals, so 10."""
        dose = ParsedDose(quantity=10.004, frequency=1, unit='ml')
        assert calculate_total_quantity(dose, 1, FormCategory.LIQUID) == 10


class TestInvalidDaysSupply:
    """Days supply must be a positive whole number."""

    @pytest.mark.parametrize("days", [0, -5, None, 2.5, True, "30"])
    def test_rejected(self, days):
        dose = ParsedDose(quantity=1, frequency=1, unit='tablet')

        result = calculate_total_quantity(dose, days, FormCategory.TABLET)

        assert isinstance(result, Failure)
        assert result.kind == FailureKind.INVALID_DAYS_SUPPLY

    def test_integral_float_accepted(self):
        dose = ParsedDose(quantity=1, frequency=1, unit='tablet')
        assert calculate_total_quantity(dose, 30.0, FormCategory.TABLET) == 30
