"""
NDC Calculator Extractors
=========================

SIG parsing, package record extraction and catalog lookup.
"""

from .sig_parser import (
    parse_sig,
    extract_quantity_unit,
    extract_frequency,
    normalize_sig_unit,
)

from .package_parser import (
    extract_package_size,
    record_from_fda,
    normalize_ndc,
)

from .catalog import (
    PackageCatalog,
    NameResolver,
    LocalPackageCatalog,
    search_terms,
    dedupe_related,
)

__all__ = [
    # SIG parsing
    'parse_sig',
    'extract_quantity_unit',
    'extract_frequency',
    'normalize_sig_unit',
    # Package records
    'extract_package_size',
    'record_from_fda',
    'normalize_ndc',
    # Catalog
    'PackageCatalog',
    'NameResolver',
    'LocalPackageCatalog',
    'search_terms',
    'dedupe_related',
]
