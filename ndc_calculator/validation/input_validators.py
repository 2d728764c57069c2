# validation/input_validators.py
"""
Input Validators
================

Validation of prescription requests before any lookup or calculation:
- Drug name or NDC present
- SIG present and parseable
- Days supply within 1..365
"""

from typing import Optional

from ndc_calculator.config.calculator_config import VALIDATION_CONFIG
from ndc_calculator.extractors.sig_parser import parse_sig
from ndc_calculator.models import Failure, FailureKind, PrescriptionRequest
from ndc_calculator.validation.result import ValidationResult


def is_valid_days_supply(days_supply) -> bool:
    """True for a whole number of at least min_days_supply (bools excluded)."""
    if isinstance(days_supply, bool) or not isinstance(days_supply, (int, float)):
        return False
    if isinstance(days_supply, float) and not days_supply.is_integer():
        return False
    return days_supply >= VALIDATION_CONFIG.min_days_supply


def validate_sig(sig) -> ValidationResult:
    """Check that a SIG is present and parseable."""
    result = ValidationResult("SIG")

    parsed = parse_sig(sig)
    if isinstance(parsed, Failure):
        if parsed.kind == FailureKind.EMPTY_INPUT:
            result.add_error("SIG (prescription instructions) is required")
        else:
            result.add_error(
                'SIG format is invalid. Please use format like "Take 1 tablet twice daily"'
            )

    return result


def validate_days_supply(days_supply: Optional[int]) -> ValidationResult:
    """Days supply must be a whole number within the configured limits."""
    result = ValidationResult("Days supply")

    if not is_valid_days_supply(days_supply):
        result.add_error("Days supply must be greater than 0")
        return result

    result.add_check(
        f"Days supply cannot exceed {VALIDATION_CONFIG.max_days_supply} days",
        days_supply <= VALIDATION_CONFIG.max_days_supply,
        f"got {days_supply}",
    )
    return result


def validate_input(request: PrescriptionRequest) -> ValidationResult:
    """
    Validate a prescription request.

    Returns:
        ValidationResult listing every problem found
    """
    result = ValidationResult("Prescription input")

    result.add_check(
        "Either drug name or NDC must be provided",
        bool((request.drug_name or '').strip() or (request.ndc or '').strip()),
    )
    result.merge(validate_sig(request.sig))
    result.merge(validate_days_supply(request.days_supply))

    return result
