# extractors/package_parser.py
"""
Package Record Parser
=====================

Turns openFDA NDC directory records into PackageRecords and normalizes
NDC codes typed by users.
"""

import re
from typing import Any, Dict, Optional, Tuple

from ndc_calculator.models import PackageRecord


def extract_package_size(package_description: Optional[str]) -> Tuple[float, str]:
    """
    Package size and unit from a package description.

    Examples:
        "30 TABLET in 1 BOTTLE"  -> (30.0, 'tablet')
        "5 mL in 1 VIAL"         -> (5.0, 'ml')
        "87.1 g in 1 PACKAGE"    -> (87.1, 'g')

    Falls back to (1.0, 'unit') when nothing can be read.
    """
    if not package_description:
        return 1.0, 'unit'

    match = re.search(r'(\d+(?:\.\d+)?)\s+([A-Za-z]+)', package_description)
    if match:
        return float(match.group(1)), match.group(2).lower()

    return 1.0, 'unit'


def record_from_fda(raw: Dict[str, Any]) -> Optional[PackageRecord]:
    """
    Map one openFDA NDC record to a PackageRecord.

    Returns:
        PackageRecord, or None when the record has no product_ndc
    """
    if not raw or not raw.get('product_ndc'):
        return None

    packaging = raw.get('packaging') or []
    if packaging:
        description = packaging[0].get('description')
    else:
        description = raw.get('package_description')

    size, unit = extract_package_size(description)
    is_active = raw.get('ndc_exclude_flag') != 'Y' and raw.get('finished') is not False

    ingredients = raw.get('active_ingredients') or []
    strength = ingredients[0].get('strength') if ingredients else None

    name = (
        raw.get('brand_name')
        or raw.get('generic_name')
        or raw.get('product_name')
        or 'Unknown Product'
    )

    return PackageRecord(
        ndc=raw['product_ndc'],
        name=name,
        dosage_form=raw.get('dosage_form') or 'Unknown',
        strength=strength or 'Unknown',
        package_size=size,
        unit=unit,
        is_active=is_active,
        brand_name=raw.get('brand_name'),
        generic_name=raw.get('generic_name'),
        package_description=description,
        listed_date=raw.get('listed'),
    )


def normalize_ndc(ndc: str) -> Tuple[str, str]:
    """
    Normalize an NDC code.

    Undashed 11, 10 and 9 digit codes are formatted 5-4-2, 4-4-2 and 5-4.

    Returns:
        (formatted, digits_only)
    """
    ndc = (ndc or '').strip()
    digits = re.sub(r'[-\s]', '', ndc)

    formatted = ndc
    if '-' not in ndc:
        if len(digits) == 11:
            formatted = f"{digits[:5]}-{digits[5:9]}-{digits[9:]}"
        elif len(digits) == 10:
            formatted = f"{digits[:4]}-{digits[4:8]}-{digits[8:]}"
        elif len(digits) == 9:
            formatted = f"{digits[:5]}-{digits[5:]}"
        else:
            formatted = digits

    return formatted, digits
