# extractors/sig_parser.py
"""
SIG Parser
==========

Extracts dose quantity, unit and daily frequency from free-text
prescription instructions ("Take 1 tablet by mouth twice daily").
Uses the unit vocabulary and frequency rules in config/sig_patterns.yaml.
"""

import logging
import re
from typing import Dict, Optional, Union

from ndc_calculator.config.calculator_config import SIG_CONFIG, load_sig_patterns
from ndc_calculator.models import Failure, FailureKind, ParsedDose

logger = logging.getLogger(__name__)

_patterns_cache: Optional[Dict] = None
_quantity_regex: Optional[re.Pattern] = None


def _load_patterns() -> Dict:
    """Load and cache SIG patterns from YAML."""
    global _patterns_cache
    if _patterns_cache is None:
        _patterns_cache = load_sig_patterns()
    return _patterns_cache


def _get_quantity_regex() -> re.Pattern:
    """Compile the number+unit pattern from the unit vocabulary."""
    global _quantity_regex
    if _quantity_regex is None:
        units = '|'.join(re.escape(u) for u in _load_patterns()['units'])
        _quantity_regex = re.compile(rf'(\d+(?:\.\d+)?)\s*({units})', re.IGNORECASE)
    return _quantity_regex


def normalize_sig_unit(unit: str) -> str:
    """Lowercase and drop a trailing plural 's'."""
    unit = unit.lower()
    return unit[:-1] if unit.endswith('s') else unit


def extract_quantity_unit(sig: str) -> Optional[Dict[str, Union[float, str]]]:
    """
    Find the first number immediately followed by a known unit.

    Returns:
        {'quantity': float, 'unit': str} or None
    """
    match = _get_quantity_regex().search(sig)
    if not match:
        return None
    return {
        'quantity': float(match.group(1)),
        'unit': normalize_sig_unit(match.group(2)),
    }


def extract_frequency(sig: str) -> float:
    """
    Doses per day from frequency keywords.

    Rules are checked in priority order regardless of where the keyword
    appears; falls back to the configured default (once daily).
    """
    patterns = _load_patterns()
    text = sig.lower()

    for rule in patterns['frequencies']:
        if any(keyword in text for keyword in rule['keywords']):
            return float(rule['per_day'])

    logger.debug(f"No frequency keyword in SIG, defaulting to daily: {sig!r}")
    return float(patterns['default_frequency'])


def parse_sig(sig) -> Union[ParsedDose, Failure]:
    """
    Parse a SIG into a ParsedDose.

    Args:
        sig: Prescription instruction text

    Returns:
        ParsedDose, or Failure with EMPTY_INPUT / NO_QUANTITY_UNIT
    """
    if not isinstance(sig, str) or not sig.strip():
        return Failure(FailureKind.EMPTY_INPUT, "SIG is required")

    text = sig.strip().lower()

    found = extract_quantity_unit(text)
    if found is None or found['quantity'] <= 0:
        logger.info(f"Could not parse quantity and unit from SIG: {sig!r}")
        return Failure(
            FailureKind.NO_QUANTITY_UNIT,
            f'Failed to parse SIG: "{sig}"',
            tuple(SIG_CONFIG.example_sigs),
        )

    return ParsedDose(
        quantity=found['quantity'],
        frequency=extract_frequency(text),
        unit=found['unit'],
    )
