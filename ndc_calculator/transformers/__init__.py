"""Dosage-form classification, quantity calculation and package optimization."""

from .form_classifier import classify_dosage_form, classify_record, dominant_category
from .quantity_calculator import calculate_total_quantity, base_quantity, round_for_category
from .package_optimizer import (
    find_optimal_packages,
    find_multi_pack_combinations,
    single_pack_candidate,
    rank_candidates,
)

__all__ = [
    'classify_dosage_form',
    'classify_record',
    'dominant_category',
    'calculate_total_quantity',
    'base_quantity',
    'round_for_category',
    'find_optimal_packages',
    'find_multi_pack_combinations',
    'single_pack_candidate',
    'rank_candidates',
]
