# transformers/package_optimizer.py
"""
Package Optimizer
=================

Chooses package sizes (NDCs) that cover a required quantity with minimal
waste.

Pass 1: every record on its own (ceil(quantity / size) packs).
Pass 2: combinations of 2 or 3 distinct sizes, for tablets and capsules
        only, kept when overfill is within 20% of the quantity.

Candidates are ranked: exact matches, then optimal, then lowest overfill,
then fewest packages.
"""

import logging
import math
from dataclasses import dataclass
from itertools import combinations
from typing import Dict, List, Sequence, Tuple

from ndc_calculator.config.calculator_config import OPTIMIZER_CONFIG
from ndc_calculator.models import MatchCandidate, MultiPackEntry, PackageRecord
from ndc_calculator.transformers.form_classifier import dominant_category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Combination:
    """Accepted multi-size combination, entries ordered by size descending."""

    entries: Tuple[Tuple[PackageRecord, int], ...]
    overfill: float

    @property
    def total_packages(self) -> int:
        return sum(count for _, count in self.entries)


def _clean(value: float) -> float:
    """Round away float noise so exact fills compare equal to zero."""
    cleaned = round(value, OPTIMIZER_CONFIG.decimal_places)
    return 0.0 if cleaned == 0 else cleaned


def _ceil_div(amount: float, size: float) -> int:
    """Smallest count of `size` covering `amount`."""
    count = math.ceil(_clean(amount / size))
    slack = OPTIMIZER_CONFIG.fill_tolerance * max(1.0, abs(amount))
    while count * size < amount - slack:
        count += 1
    return count


# =============================================================================
# PASS 1: SINGLE PACK
# =============================================================================

def single_pack_candidate(quantity: float, record: PackageRecord) -> MatchCandidate:
    """Fill the quantity with one package size only."""
    size = record.package_size
    packages_needed = _ceil_div(quantity, size)
    overfill = max(0.0, _clean(packages_needed * size - quantity))
    is_optimal = overfill == 0 or overfill <= size * OPTIMIZER_CONFIG.single_pack_tolerance

    return MatchCandidate(
        record=record,
        quantity_needed=quantity,
        packages_needed=packages_needed,
        overfill=overfill,
        underfill=None,
        is_optimal=is_optimal,
    )


# =============================================================================
# PASS 2: MULTI PACK
# =============================================================================

def _records_by_size(records: Sequence[PackageRecord]) -> List[PackageRecord]:
    """One active record per distinct size (first seen), largest first."""
    by_size: Dict[float, PackageRecord] = {}
    for record in records:
        if record.is_active and record.package_size not in by_size:
            by_size[record.package_size] = record
    return sorted(by_size.values(), key=lambda r: r.package_size, reverse=True)


def _accept(quantity: float, entries: Tuple[Tuple[PackageRecord, int], ...]):
    """Combination if every count is positive and overfill is within bounds."""
    if any(count <= 0 for _, count in entries):
        return None

    dispensed = sum(record.package_size * count for record, count in entries)
    overfill = _clean(dispensed - quantity)
    if overfill < 0 or overfill > quantity * OPTIMIZER_CONFIG.multi_pack_max_overfill:
        return None

    return _Combination(entries=entries, overfill=overfill)


def search_two_sizes(quantity: float, sized: List[PackageRecord]) -> List[_Combination]:
    """Every pair of sizes s1 > s2, scanning counts of the larger size."""
    found = []

    for large, small in combinations(sized, 2):
        max_count = _ceil_div(quantity, large.package_size) + 1
        if max_count > OPTIMIZER_CONFIG.max_search_iterations:
            logger.warning(
                f"Capping two-size search for sizes {large.package_size:g}/"
                f"{small.package_size:g} at {OPTIMIZER_CONFIG.max_search_iterations} iterations"
            )
            max_count = OPTIMIZER_CONFIG.max_search_iterations

        for count_large in range(max_count + 1):
            remaining = max(0.0, quantity - count_large * large.package_size)
            count_small = _ceil_div(remaining, small.package_size)
            combo = _accept(quantity, ((large, count_large), (small, count_small)))
            if combo is not None:
                found.append(combo)

    return found


def search_three_sizes(quantity: float, sized: List[PackageRecord]) -> List[_Combination]:
    """Bounded brute force over triples s1 > s2 > s3."""
    found = []
    max_count = OPTIMIZER_CONFIG.three_size_max_count

    for first, second, third in combinations(sized, 3):
        for count_first in range(max_count + 1):
            for count_second in range(max_count + 1):
                remaining = max(
                    0.0,
                    quantity
                    - count_first * first.package_size
                    - count_second * second.package_size,
                )
                count_third = _ceil_div(remaining, third.package_size)
                combo = _accept(
                    quantity,
                    ((first, count_first), (second, count_second), (third, count_third)),
                )
                if combo is not None:
                    found.append(combo)

    return found


def find_multi_pack_combinations(
    quantity: float,
    records: Sequence[PackageRecord],
) -> List[_Combination]:
    """
    Search 2-size, then (if few results) 3-size combinations.

    Returns:
        Best combinations by (overfill, total packages), at most
        max_multi_pack_results
    """
    sized = _records_by_size(records)
    if len(sized) < 2:
        return []

    found = search_two_sizes(quantity, sized)

    if len(found) < OPTIMIZER_CONFIG.three_size_trigger and len(sized) >= 3:
        found.extend(search_three_sizes(quantity, sized))

    found.sort(key=lambda c: (c.overfill, c.total_packages))
    return found[:OPTIMIZER_CONFIG.max_multi_pack_results]


def multi_pack_candidate(quantity: float, combo: _Combination) -> MatchCandidate:
    """Shown under the largest package of the combination."""
    tolerance = quantity * OPTIMIZER_CONFIG.multi_pack_optimal_tolerance

    return MatchCandidate(
        record=combo.entries[0][0],
        quantity_needed=quantity,
        packages_needed=combo.total_packages,
        overfill=combo.overfill,
        underfill=None,
        is_optimal=combo.overfill == 0 or combo.overfill <= tolerance,
        multi_pack=tuple(MultiPackEntry(record, count) for record, count in combo.entries),
    )


# =============================================================================
# RANKING
# =============================================================================

def _rank_key(candidate: MatchCandidate):
    exact = candidate.is_exact
    # Multi-pack wins ties only between exact matches
    kind = (0 if candidate.is_multi_pack else 1) if exact else 0
    return (
        not exact,
        not candidate.is_optimal,
        candidate.overfill,
        kind,
        candidate.packages_needed,
    )


def rank_candidates(candidates: Sequence[MatchCandidate]) -> List[MatchCandidate]:
    """Stable sort into presentation order."""
    return sorted(candidates, key=_rank_key)


# =============================================================================
# ENTRY POINT
# =============================================================================

def find_optimal_packages(
    quantity: float,
    records: Sequence[PackageRecord],
) -> List[MatchCandidate]:
    """
    Rank single-pack and multi-pack ways of filling a quantity.

    Args:
        quantity: Total quantity needed (> 0)
        records: Catalog package records

    Returns:
        Ranked candidates; empty when there is nothing to rank
    """
    if not records:
        return []

    if quantity <= 0:
        logger.warning(f"Refusing to optimize non-positive quantity: {quantity}")
        return []

    usable = [r for r in records if r.package_size > 0]
    if len(usable) < len(records):
        logger.debug(f"Dropped {len(records) - len(usable)} records with package size <= 0")
    if not usable:
        return []

    candidates = [single_pack_candidate(quantity, r) for r in usable]

    category = dominant_category(usable)
    if category.value in OPTIMIZER_CONFIG.multi_pack_categories:
        combos = find_multi_pack_combinations(quantity, usable)
        candidates.extend(multi_pack_candidate(quantity, c) for c in combos)
        logger.debug(f"{len(combos)} multi-pack combinations for {quantity:g} ({category.value})")

    return rank_candidates(candidates)
