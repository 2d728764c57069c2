# pipeline.py
"""
Prescription Pipeline
=====================

Main pipeline integrating validation, catalog lookup, SIG parsing,
quantity calculation and package optimization.
"""

import logging
import os
import sys
from typing import List, Optional, Tuple, Union

from ndc_calculator.config.calculator_config import CATALOG_CONFIG
from ndc_calculator.exporters.match_exporter import export_matches, summarize_matches
from ndc_calculator.extractors.catalog import (
    LocalPackageCatalog,
    NameResolver,
    PackageCatalog,
    dedupe_related,
)
from ndc_calculator.extractors.sig_parser import parse_sig
from ndc_calculator.models import (
    Failure,
    FailureKind,
    FormCategory,
    PackageRecord,
    PrescriptionRequest,
    PrescriptionResult,
    RelatedDrug,
)
from ndc_calculator.transformers.form_classifier import classify_dosage_form, dominant_category
from ndc_calculator.transformers.package_optimizer import find_optimal_packages
from ndc_calculator.transformers.quantity_calculator import calculate_total_quantity
from ndc_calculator.validation.input_validators import validate_input

logger = logging.getLogger(__name__)

NAME_SUGGESTIONS = (
    'Try searching with just the brand name (e.g., "Humalog" instead of "Humalog Insulin")',
    'Remove descriptive words like "insulin", "tablet", "capsule", "liquid"',
    'Try the generic name instead of brand name (or vice versa)',
    'Use a specific NDC code if you have it',
)


class PrescriptionPipeline:
    """Turns a prescription request into ranked package matches."""

    def __init__(self, catalog: PackageCatalog, resolver: Optional[NameResolver] = None):
        """
        Initialize pipeline.

        Args:
            catalog: Package catalog collaborator
            resolver: Optional drug-name resolver (identifiers, related names)
        """
        self.catalog = catalog
        self.resolver = resolver

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _related(self, identifier: Optional[str]) -> List[RelatedDrug]:
        if self.resolver is None or not identifier:
            return []
        related = self.resolver.related(identifier)
        if isinstance(related, Failure):
            logger.info(f"Related-name lookup failed for {identifier}: {related.message}")
            return []
        return [d for d in dedupe_related(related) if d.identifier != identifier]

    def _lookup_by_name(
        self,
        drug_name: str,
        warnings: List[str],
    ) -> Tuple[Union[List[PackageRecord], Failure], str, Optional[str]]:
        """
        Name lookup with related-name and normalized-name fallbacks.

        Returns:
            (records or Failure, display name, identifier)
        """
        identifier = None
        normalized_name = None
        if self.resolver is not None:
            resolved = self.resolver.normalize(drug_name)
            if isinstance(resolved, Failure):
                logger.info(f"Name resolution failed for {drug_name!r}: {resolved.message}")
            else:
                identifier = resolved.identifier
                normalized_name = resolved.name

        records = self.catalog.lookup_by_name(drug_name)
        if not isinstance(records, Failure) and records:
            return records, drug_name, identifier

        related = self._related(identifier)
        for drug in related[:CATALOG_CONFIG.max_related_attempts]:
            found = self.catalog.lookup_by_name(drug.name)
            if not isinstance(found, Failure) and found:
                warnings.append(f'Found NDCs using related drug name: "{drug.name}"')
                return found, drug.name, identifier

        if normalized_name and normalized_name != drug_name:
            found = self.catalog.lookup_by_name(normalized_name)
            if not isinstance(found, Failure) and found:
                warnings.append(f'Found NDCs using normalized name: "{normalized_name}"')
                return found, normalized_name, identifier

        details = list(NAME_SUGGESTIONS)
        details.extend(f"Related drug you could try: {d.name}" for d in related[:5])
        failure = Failure(
            FailureKind.NOT_FOUND,
            f'No NDCs found for "{drug_name}".',
            tuple(details),
        )
        return failure, drug_name, identifier

    def _lookup_by_ndc(self, ndc: str) -> Tuple[Union[List[PackageRecord], Failure], str]:
        records = self.catalog.lookup_by_ndc(ndc)
        if isinstance(records, Failure):
            return records, ndc
        if not records:
            return Failure(
                FailureKind.NOT_FOUND,
                f"No NDCs found for the provided NDC code: {ndc}. "
                "Please verify the NDC code is correct.",
            ), ndc
        return records, records[0].name

    # -------------------------------------------------------------------------
    # Calculation
    # -------------------------------------------------------------------------

    @staticmethod
    def resolve_category(records: List[PackageRecord], sig_unit: str) -> FormCategory:
        """Dominant record category; the SIG unit decides when records are unclear."""
        category = dominant_category(records)
        if category == FormCategory.OTHER and records:
            category = classify_dosage_form(records[0].dosage_form, sig_unit)
        return category

    def calculate(self, request: PrescriptionRequest) -> Union[PrescriptionResult, Failure]:
        """
        Run the full calculation for one request.

        Returns:
            PrescriptionResult, or a Failure describing the first blocking problem
        """
        validation = validate_input(request)
        if not validation.is_valid:
            return Failure(FailureKind.VALIDATION_ERROR, "Invalid input", tuple(validation.errors))

        warnings: List[str] = []
        identifier = None

        if (request.drug_name or '').strip():
            records, drug_name, identifier = self._lookup_by_name(
                request.drug_name.strip(), warnings
            )
        else:
            records, drug_name = self._lookup_by_ndc(request.ndc.strip())

        if isinstance(records, Failure):
            return records

        records = [r for r in records if r.package_size > 0]
        if not records:
            return Failure(
                FailureKind.NO_RECORDS,
                f'No usable NDC package records for "{drug_name}"',
            )

        dose = parse_sig(request.sig)
        if isinstance(dose, Failure):
            return dose

        category = self.resolve_category(records, dose.unit)
        total = calculate_total_quantity(dose, request.days_supply, category)
        if isinstance(total, Failure):
            return total

        matches = find_optimal_packages(total, records)
        if not matches:
            return Failure(
                FailureKind.NO_MATCHES,
                f"No matching NDCs found for the calculated quantity ({total} {dose.unit})",
            )

        inactive_count = sum(1 for m in matches if not m.record.is_active)
        if inactive_count > 0:
            warnings.append(f"{inactive_count} inactive NDC(s) found. Please verify before use.")

        overfill_count = sum(1 for m in matches if m.overfill > 0)
        if overfill_count > 0:
            warnings.append(
                f"{overfill_count} NDC(s) have overfill. Consider alternatives if available."
            )

        logger.info(
            f"{drug_name}: {total} {dose.unit} ({category.value}), {len(matches)} matches"
        )

        return PrescriptionResult(
            drug_name=drug_name,
            total_quantity=total,
            unit=dose.unit,
            category=category,
            matches=matches,
            identifier=identifier,
            related_drugs=self._related(identifier),
            warnings=warnings,
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Calculate dispensing quantity and best NDC packages for a prescription'
    )
    parser.add_argument('--sig', required=True, help='Prescription instructions')
    parser.add_argument('--days-supply', type=int, required=True, help='Days supply')
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--drug-name', help='Drug name to search the catalog for')
    group.add_argument('--ndc', help='Product or package NDC code')
    parser.add_argument('--catalog', required=True, help='Catalog file (.csv or openFDA .json)')
    parser.add_argument('--output', help='Write matches to .csv or .json')
    parser.add_argument(
        '--log-level',
        default=os.getenv('LOG_LEVEL', 'WARNING'),
        help='Logging level (default: LOG_LEVEL env or WARNING)',
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    catalog = LocalPackageCatalog.from_path(args.catalog)
    pipeline = PrescriptionPipeline(catalog)
    result = pipeline.calculate(PrescriptionRequest(
        sig=args.sig,
        days_supply=args.days_supply,
        drug_name=args.drug_name,
        ndc=args.ndc,
    ))

    if isinstance(result, Failure):
        print(f"{result.kind.value}: {result.message}", file=sys.stderr)
        for detail in result.details:
            print(f"  - {detail}", file=sys.stderr)
        return 1

    print("=" * 60)
    print(f"{result.drug_name}")
    print("=" * 60)
    print(f"Total quantity: {result.total_quantity:g} {result.unit} ({result.category.value})")
    print(f"\nMatches ({len(result.matches)}):")
    for line in summarize_matches(result.matches):
        print(line)
    if result.warnings:
        print("\nWarnings:")
        for warning in result.warnings:
            print(f"  ! {warning}")
    print("=" * 60)

    if args.output:
        path = export_matches(result.matches, args.output)
        print(f"Saved matches to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
