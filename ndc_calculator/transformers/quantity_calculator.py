# transformers/quantity_calculator.py
"""
Quantity Calculator
===================

Total dispensing quantity = dose quantity x doses per day x days supply,
rounded per dosage form:
- insulin: nearest whole unit (ties to even)
- liquid: 2 decimals, then up to the next whole ml
- everything else: up to the next whole unit
"""

import math
from typing import Union

from ndc_calculator.config.calculator_config import QUANTITY_CONFIG
from ndc_calculator.models import Failure, FailureKind, FormCategory, ParsedDose
from ndc_calculator.validation.input_validators import is_valid_days_supply


def base_quantity(dose: ParsedDose, days_supply: int) -> float:
    """Unrounded product, with float noise removed."""
    product = dose.quantity * dose.frequency * days_supply
    return round(product, QUANTITY_CONFIG.noise_decimal_places)


def round_for_category(quantity: float, category: FormCategory) -> int:
    if category == FormCategory.INSULIN:
        return int(round(quantity))
    if category == FormCategory.LIQUID:
        return math.ceil(round(quantity, QUANTITY_CONFIG.liquid_decimal_places))
    return math.ceil(quantity)


def calculate_total_quantity(
    dose: ParsedDose,
    days_supply: int,
    category: FormCategory = FormCategory.OTHER,
) -> Union[int, Failure]:
    """
    Calculate the total quantity to dispense.

    Args:
        dose: Parsed SIG
        days_supply: Whole days, > 0
        category: Dosage form category of the product

    Returns:
        Whole quantity, or Failure(INVALID_DAYS_SUPPLY)
    """
    if not is_valid_days_supply(days_supply):
        return Failure(
            FailureKind.INVALID_DAYS_SUPPLY,
            f"Days supply must be greater than 0, got {days_supply!r}",
        )

    return round_for_category(base_quantity(dose, int(days_supply)), category)
