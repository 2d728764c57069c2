"""
Request Validation
==================

Checks prescription input before lookup and calculation.
"""

from .result import ValidationResult
from .input_validators import (
    is_valid_days_supply,
    validate_days_supply,
    validate_input,
    validate_sig,
)

__all__ = [
    'ValidationResult',
    'is_valid_days_supply',
    'validate_days_supply',
    'validate_input',
    'validate_sig',
]
