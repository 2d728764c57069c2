# transformers/form_classifier.py
"""
Dosage Form Classifier
======================

Maps a (dosage form, unit) pair to a FormCategory with an ordered list of
rules; the first rule that matches wins. The category selects rounding in
the quantity calculator and whether the optimizer mixes package sizes.
"""

import re
from collections import Counter
from typing import Callable, Iterable, Tuple

from ndc_calculator.models import FormCategory, PackageRecord


def _contains(text: str, words: Iterable[str]) -> bool:
    return any(w in text for w in words)


def _is_insulin(form: str, unit: str) -> bool:
    return (
        'insulin' in form
        or re.search(r'\bpen\b', form) is not None
        or 'unit' in unit
        or unit in ('u', 'iu')
    )


def _is_inhaler(form: str, unit: str) -> bool:
    return (
        _contains(form, ['inhaler', 'aerosol', 'spray'])
        or _contains(unit, ['puff', 'actuation'])
    )


def _is_liquid(form: str, unit: str) -> bool:
    return (
        _contains(form, ['liquid', 'solution', 'suspension', 'syrup', 'elixir'])
        or _contains(unit, ['ml', 'fl oz'])
        or re.search(r'\bl\b', unit) is not None
    )


def _is_tablet(form: str, unit: str) -> bool:
    return 'tablet' in form or 'tablet' in unit


def _is_capsule(form: str, unit: str) -> bool:
    return 'capsule' in form or 'capsule' in unit


FORM_RULES: Tuple[Tuple[Callable[[str, str], bool], FormCategory], ...] = (
    (_is_insulin, FormCategory.INSULIN),
    (_is_inhaler, FormCategory.INHALER),
    (_is_liquid, FormCategory.LIQUID),
    (_is_tablet, FormCategory.TABLET),
    (_is_capsule, FormCategory.CAPSULE),
)


def classify_dosage_form(dosage_form: str, unit: str) -> FormCategory:
    """
    Classify a dosage form.

    Args:
        dosage_form: Catalog dosage form, e.g. "TABLET, FILM COATED"
        unit: Package or SIG unit, e.g. "tablet", "ml", "unit"

    Returns:
        FormCategory (OTHER when no rule matches)
    """
    form = (dosage_form or '').lower().strip()
    unit = (unit or '').lower().strip()

    for predicate, category in FORM_RULES:
        if predicate(form, unit):
            return category

    return FormCategory.OTHER


def classify_record(record: PackageRecord) -> FormCategory:
    return classify_dosage_form(record.dosage_form, record.unit)


def dominant_category(records: Iterable[PackageRecord]) -> FormCategory:
    """Most common category across records; ties go to the first seen."""
    counts = Counter(classify_record(r) for r in records)
    if not counts:
        return FormCategory.OTHER
    return counts.most_common(1)[0][0]
