"""
Match Exporters
===============

Tabular views of ranked package matches.
"""

from .match_exporter import matches_to_frame, export_matches, summarize_matches

__all__ = [
    'matches_to_frame',
    'export_matches',
    'summarize_matches',
]
