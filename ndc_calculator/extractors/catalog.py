# extractors/catalog.py
"""
Package Catalog
===============

Collaborator contracts for package-catalog and drug-name lookups, and a
local catalog backed by a pandas DataFrame (CSV or openFDA JSON export).

Name lookup cascade:
1. Search-term variants (full name, first word, without descriptive
   words, last word)
2. Substring / fuzzy match (rapidfuzz partial ratio) on name, brand and
   generic name
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol, Union

import pandas as pd
from rapidfuzz import fuzz, process

from ndc_calculator.config.calculator_config import CATALOG_CONFIG
from ndc_calculator.extractors.package_parser import (
    extract_package_size,
    normalize_ndc,
    record_from_fda,
)
from ndc_calculator.models import (
    Failure,
    FailureKind,
    PackageRecord,
    RelatedDrug,
    ResolvedName,
)

logger = logging.getLogger(__name__)


CATALOG_COLUMNS = [
    'ndc',
    'name',
    'dosage_form',
    'strength',
    'package_size',
    'unit',
    'is_active',
    'brand_name',
    'generic_name',
    'package_description',
    'listed_date',
]

NAME_COLUMNS = ['name', 'brand_name', 'generic_name']


# =============================================================================
# COLLABORATOR CONTRACTS
# =============================================================================

class PackageCatalog(Protocol):
    """Returns package records for a drug name or NDC code."""

    def lookup_by_name(self, name: str) -> Union[List[PackageRecord], Failure]:
        ...

    def lookup_by_ndc(self, ndc: str) -> Union[List[PackageRecord], Failure]:
        ...


class NameResolver(Protocol):
    """Canonical identifier and related names for a drug."""

    def normalize(self, name: str) -> Union[ResolvedName, Failure]:
        ...

    def related(self, identifier: str) -> Union[List[RelatedDrug], Failure]:
        ...


# =============================================================================
# SEARCH TERMS
# =============================================================================

def search_terms(drug_name: str, common_words: Optional[List[str]] = None) -> List[str]:
    """
    Search-term variants for a drug name, most specific first.

    "Humalog Insulin Pen" -> ['humalog insulin pen', 'humalog', 'pen']
    """
    if common_words is None:
        common_words = CATALOG_CONFIG.common_words

    cleaned = ' '.join((drug_name or '').lower().split())
    if not cleaned:
        return []

    words = cleaned.split(' ')
    filtered = [w for w in words if w not in common_words]

    terms = [cleaned, words[0]]
    if filtered:
        terms.append(' '.join(filtered))
    if len(words) > 1:
        terms.append(words[-1])

    return list(dict.fromkeys(terms))


def dedupe_related(related: List[RelatedDrug], limit: int = None) -> List[RelatedDrug]:
    """Drop repeated identifiers, keep order, cap the list."""
    if limit is None:
        limit = CATALOG_CONFIG.max_related_drugs

    seen = set()
    unique = []
    for drug in related:
        if drug.identifier in seen:
            continue
        seen.add(drug.identifier)
        unique.append(drug)
    return unique[:limit]


# =============================================================================
# LOCAL CATALOG
# =============================================================================

class LocalPackageCatalog:
    """PackageCatalog over an in-memory table of package records."""

    def __init__(self, frame: pd.DataFrame, fuzzy_threshold: float = None):
        """
        Initialize catalog.

        Args:
            frame: DataFrame with CATALOG_COLUMNS (missing optional
                columns are filled)
            fuzzy_threshold: rapidfuzz score (0-100) for a name hit
        """
        self.frame = self._prepare(frame)
        self.fuzzy_threshold = (
            CATALOG_CONFIG.fuzzy_match_threshold if fuzzy_threshold is None else fuzzy_threshold
        )

    @classmethod
    def from_records(cls, records: List[PackageRecord], **kwargs) -> 'LocalPackageCatalog':
        frame = pd.DataFrame([r.to_dict() for r in records], columns=CATALOG_COLUMNS)
        return cls(frame, **kwargs)

    @classmethod
    def from_csv(cls, path, **kwargs) -> 'LocalPackageCatalog':
        frame = pd.read_csv(path, dtype={'ndc': str, 'product_ndc': str})
        frame = frame.rename(columns=CATALOG_CONFIG.column_aliases)
        logger.info(f"Loaded {len(frame):,} catalog rows from {path}")
        return cls(frame, **kwargs)

    @classmethod
    def from_fda_json(cls, path, **kwargs) -> 'LocalPackageCatalog':
        """Load an openFDA NDC payload ({"results": [...]})."""
        with open(path, 'r') as f:
            payload = json.load(f)

        raw_records = payload.get('results', []) if isinstance(payload, dict) else payload
        records = [r for r in (record_from_fda(raw) for raw in raw_records) if r is not None]
        logger.info(f"Mapped {len(records):,}/{len(raw_records):,} openFDA records from {path}")
        return cls.from_records(records, **kwargs)

    @classmethod
    def from_path(cls, path, **kwargs) -> 'LocalPackageCatalog':
        """Dispatch on file suffix (.json -> openFDA, otherwise CSV)."""
        if Path(path).suffix.lower() == '.json':
            return cls.from_fda_json(path, **kwargs)
        return cls.from_csv(path, **kwargs)

    @staticmethod
    def _prepare(frame: pd.DataFrame) -> pd.DataFrame:
        frame = frame.copy()

        if 'package_size' not in frame.columns and 'package_description' in frame.columns:
            parsed = frame['package_description'].map(extract_package_size)
            frame['package_size'] = parsed.map(lambda p: p[0])
            if 'unit' not in frame.columns:
                frame['unit'] = parsed.map(lambda p: p[1])

        for column in CATALOG_COLUMNS:
            if column not in frame.columns:
                frame[column] = None

        frame['ndc'] = frame['ndc'].fillna('').astype(str)
        frame['name'] = frame['name'].fillna('Unknown Product').astype(str)
        frame['dosage_form'] = frame['dosage_form'].fillna('Unknown').astype(str)
        frame['strength'] = frame['strength'].fillna('Unknown').astype(str)
        frame['unit'] = frame['unit'].fillna('unit').astype(str).str.lower()
        frame['package_size'] = pd.to_numeric(frame['package_size'], errors='coerce').fillna(0.0)
        frame['is_active'] = frame['is_active'].map(_to_bool)

        frame['_label'] = [
            ' '.join(v for v in values if isinstance(v, str) and v).lower()
            for values in frame[NAME_COLUMNS].itertuples(index=False)
        ]
        frame['_ndc_digits'] = frame['ndc'].str.replace(r'[-\s]', '', regex=True)

        return frame[CATALOG_COLUMNS + ['_label', '_ndc_digits']].reset_index(drop=True)

    def __len__(self) -> int:
        return len(self.frame)

    def _to_records(self, rows: pd.DataFrame) -> List[PackageRecord]:
        records = []
        for row in rows.to_dict('records'):
            records.append(PackageRecord(
                ndc=row['ndc'],
                name=row['name'],
                dosage_form=row['dosage_form'],
                strength=row['strength'],
                package_size=float(row['package_size']),
                unit=row['unit'],
                is_active=bool(row['is_active']),
                brand_name=_optional_str(row['brand_name']),
                generic_name=_optional_str(row['generic_name']),
                package_description=_optional_str(row['package_description']),
                listed_date=_optional_str(row['listed_date']),
            ))
        return records

    def _match_term(self, term: str) -> pd.DataFrame:
        if self.frame.empty:
            return self.frame

        labels = self.frame['_label']
        mask = labels.str.contains(term, regex=False)

        if len(term) >= 3:
            hits = process.extract(
                term,
                labels.tolist(),
                scorer=fuzz.partial_ratio,
                score_cutoff=self.fuzzy_threshold,
                limit=None,
            )
            mask.iloc[[index for _, _, index in hits]] = True

        return self.frame[mask]

    def lookup_by_name(self, name: str) -> Union[List[PackageRecord], Failure]:
        """
        Package records for a drug name.

        Returns:
            Records for the first search term with hits, or Failure(NOT_FOUND)
        """
        for term in search_terms(name):
            if len(term) < 2:
                continue
            rows = self._match_term(term)
            if len(rows) > 0:
                logger.debug(f"Catalog term {term!r} matched {len(rows)} records")
                return self._to_records(rows)

        return Failure(FailureKind.NOT_FOUND, f'No NDCs found for "{name}"')

    def lookup_by_ndc(self, ndc: str) -> Union[List[PackageRecord], Failure]:
        """
        Package records for a product or package NDC.

        Returns:
            Matching records, or Failure(NOT_FOUND)
        """
        formatted, digits = normalize_ndc(ndc)
        if not digits or self.frame.empty:
            return Failure(FailureKind.NOT_FOUND, "NDC code is empty")

        row_digits = self.frame['_ndc_digits']
        mask = (
            (self.frame['ndc'] == formatted)
            | (row_digits == digits)
            | ((row_digits.str.len() >= 8) & row_digits.map(digits.startswith))
        )
        rows = self.frame[mask]

        if len(rows) == 0:
            return Failure(
                FailureKind.NOT_FOUND,
                f"No NDCs found for the provided NDC code: {ndc}. "
                "Please verify the NDC code is correct.",
            )
        return self._to_records(rows)


def _to_bool(value) -> bool:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ('false', 'n', 'no', '0', '')
    return bool(value)


def _optional_str(value) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    return str(value)
