# exporters/match_exporter.py
"""
Match Exporter
==============

Flattens ranked match candidates into a table for display or export.
"""

import logging
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from ndc_calculator.models import MatchCandidate

logger = logging.getLogger(__name__)

MATCH_COLUMNS = [
    'rank',
    'ndc',
    'name',
    'dosage_form',
    'package_size',
    'unit',
    'is_active',
    'quantity_needed',
    'packages_needed',
    'dispensed',
    'overfill',
    'underfill',
    'is_optimal',
    'is_multi_pack',
    'breakdown',
]


def matches_to_frame(candidates: Sequence[MatchCandidate]) -> pd.DataFrame:
    """One row per candidate, in ranked order."""
    rows = []
    for rank, candidate in enumerate(candidates, start=1):
        record = candidate.record
        rows.append({
            'rank': rank,
            'ndc': record.ndc,
            'name': record.name,
            'dosage_form': record.dosage_form,
            'package_size': record.package_size,
            'unit': record.unit,
            'is_active': record.is_active,
            'quantity_needed': candidate.quantity_needed,
            'packages_needed': candidate.packages_needed,
            'dispensed': candidate.dispensed,
            'overfill': candidate.overfill,
            'underfill': candidate.underfill,
            'is_optimal': candidate.is_optimal,
            'is_multi_pack': candidate.is_multi_pack,
            'breakdown': candidate.breakdown(),
        })

    return pd.DataFrame(rows, columns=MATCH_COLUMNS)


def export_matches(candidates: Sequence[MatchCandidate], output_path) -> Path:
    """
    Write candidates to CSV or JSON (by file suffix).

    Returns:
        Path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = matches_to_frame(candidates)
    if output_path.suffix.lower() == '.json':
        df.to_json(output_path, orient='records', indent=2)
    else:
        df.to_csv(output_path, index=False)

    logger.info(f"Saved {len(df)} matches to {output_path}")
    return output_path


def summarize_matches(candidates: Sequence[MatchCandidate]) -> List[str]:
    """Short text lines for terminal output."""
    lines = []
    for rank, c in enumerate(candidates, start=1):
        flag = "★" if c.is_optimal else " "
        status = "" if c.record.is_active else " [inactive]"
        lines.append(
            f"  {flag} {rank:>2}. {c.record.ndc:<14} {c.breakdown():<32} "
            f"overfill={c.overfill:g}{status}"
        )
    return lines
