"""Tests for dosage form classification."""

import pytest

from ndc_calculator.models import FormCategory, PackageRecord
from ndc_calculator.transformers.form_classifier import classify_dosage_form, dominant_category


def make_record(form: str, unit: str, size: float = 30) -> PackageRecord:
    return PackageRecord(
        ndc='00000-0000',
        name='Test Drug',
        dosage_form=form,
        strength='10 mg',
        package_size=size,
        unit=unit,
    )


class TestRuleCascade:
    """Test each rule of the cascade."""

    @pytest.mark.parametrize("form, unit, expected", [
        ("INJECTION, SOLUTION", "unit", FormCategory.INSULIN),
        ("Insulin Glargine", "ml", FormCategory.INSULIN),
        ("INJECTION, SUSPENSION", "u", FormCategory.INSULIN),
        ("KwikPen pen", "ml", FormCategory.INSULIN),
        ("", "IU", FormCategory.INSULIN),
        ("AEROSOL, METERED", "g", FormCategory.INHALER),
        ("SPRAY", "ml", FormCategory.INHALER),
        ("", "puff", FormCategory.INHALER),
        ("", "actuation", FormCategory.INHALER),
        ("SOLUTION", "bottle", FormCategory.LIQUID),
        ("SUSPENSION", "ml", FormCategory.LIQUID),
        ("SYRUP", "", FormCategory.LIQUID),
        ("ELIXIR", "", FormCategory.LIQUID),
        ("", "ml", FormCategory.LIQUID),
        ("", "fl oz", FormCategory.LIQUID),
        ("", "l", FormCategory.LIQUID),
        ("TABLET, FILM COATED", "tablet", FormCategory.TABLET),
        ("", "tablet", FormCategory.TABLET),
        ("CAPSULE", "capsule", FormCategory.CAPSULE),
        ("", "capsule", FormCategory.CAPSULE),
        ("CREAM", "g", FormCategory.OTHER),
        ("", "", FormCategory.OTHER),
    ])
    def test_classification(self, form, unit, expected):
        assert classify_dosage_form(form, unit) == expected

    def test_insulin_beats_inhaler(self):
        """Earlier rules win: insulin before inhaler."""
        assert classify_dosage_form("insulin pen inhaler", "") == FormCategory.INSULIN

    def test_inhaler_beats_liquid(self):
        assert classify_dosage_form("SPRAY, SOLUTION", "ml") == FormCategory.INHALER

    def test_liquid_beats_tablet(self):
        assert classify_dosage_form("TABLET, FOR SUSPENSION", "tablet") == FormCategory.LIQUID

    def test_oral_suspension_is_not_a_pen(self):
        """'pen' only counts as a word, not inside 'suspension'."""
        assert classify_dosage_form("SUSPENSION", "ml") == FormCategory.LIQUID

    def test_none_inputs(self):
        """Missing inputs are treated as empty strings."""
        assert classify_dosage_form(None, None) == FormCategory.OTHER

    def test_deterministic(self):
        results = {classify_dosage_form("Capsule, Delayed Release", "capsule") for _ in range(5)}
        assert results == {FormCategory.CAPSULE}


class TestDominantCategory:
    """Test category across a record set."""

    def test_most_common_wins(self):
        records = [
            make_record("TABLET", "tablet"),
            make_record("TABLET", "tablet"),
            make_record("SOLUTION", "ml"),
        ]
        assert dominant_category(records) == FormCategory.TABLET

    def test_tie_goes_to_first_seen(self):
        records = [
            make_record("CAPSULE", "capsule"),
            make_record("TABLET", "tablet"),
        ]
        assert dominant_category(records) == FormCategory.CAPSULE

    def test_empty(self):
        assert dominant_category([]) == FormCategory.OTHER
