"""
NDC Calculator Configuration
============================

Central configuration for SIG parsing, quantity rounding, package
optimization, catalog lookup and request validation.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List
import yaml


# =============================================================================
# PATH CONFIGURATION
# =============================================================================

PACKAGE_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PACKAGE_ROOT / "config"
SIG_PATTERNS_YAML = CONFIG_DIR / "sig_patterns.yaml"


# =============================================================================
# SIG PARSING CONFIGURATION
# =============================================================================

@dataclass
class SigConfig:
    """SIG parser settings."""

    patterns_file: Path = SIG_PATTERNS_YAML

    # Shown back to the user when a SIG cannot be parsed
    example_sigs: List[str] = field(default_factory=lambda: [
        "Take 1 tablet twice daily",
        "1 tablet daily",
        "Take 2 capsules every 12 hours",
        "Inject 10 units before meals",
    ])


SIG_CONFIG = SigConfig()


# =============================================================================
# QUANTITY CONFIGURATION
# =============================================================================

@dataclass
class QuantityConfig:
    """Rounding settings for the total dispensing quantity."""

    # Liquids are measured to this many decimals before rounding up
    liquid_decimal_places: int = 2

    # Strips binary floating point noise (0.1 * 3 * 10) before ceiling
    noise_decimal_places: int = 9


QUANTITY_CONFIG = QuantityConfig()


# =============================================================================
# OPTIMIZER CONFIGURATION
# =============================================================================

@dataclass
class OptimizerConfig:
    """Package optimizer thresholds and search bounds."""

    # Single pack optimal if overfill <= this fraction of the package size
    single_pack_tolerance: float = 0.10

    # Multi-pack optimal if overfill <= this fraction of the quantity
    multi_pack_optimal_tolerance: float = 0.05

    # Multi-pack combinations accepted only up to this fraction of the quantity
    multi_pack_max_overfill: float = 0.20

    # Keep this many multi-pack combinations after ranking
    max_multi_pack_results: int = 5

    # Three-size search runs when fewer two-size combinations were found
    three_size_trigger: int = 3
    three_size_max_count: int = 3

    # Guard on the outer count loop of the two-size search
    max_search_iterations: int = 10_000

    # Categories for which mixing package sizes is allowed
    multi_pack_categories: List[str] = field(default_factory=lambda: [
        'tablet',
        'capsule',
    ])

    # Rounding applied to overfill arithmetic
    decimal_places: int = 6

    # Shortfall (relative to the quantity) still treated as a full fill
    fill_tolerance: float = 1e-9


OPTIMIZER_CONFIG = OptimizerConfig()


# =============================================================================
# CATALOG CONFIGURATION
# =============================================================================

@dataclass
class CatalogConfig:
    """Local catalog lookup settings."""

    # rapidfuzz partial_ratio score (0-100) for a fuzzy name hit
    fuzzy_match_threshold: float = 85.0

    # Related names tried when the name lookup fails
    max_related_attempts: int = 5
    max_related_drugs: int = 15

    # Descriptive words dropped to build an extra search term
    common_words: List[str] = field(default_factory=lambda: [
        'insulin',
        'tablet',
        'capsule',
        'liquid',
        'suspension',
        'solution',
        'injection',
        'pen',
        'vial',
    ])

    # Column aliases accepted when loading a CSV catalog
    column_aliases: Dict[str, str] = field(default_factory=lambda: {
        'product_ndc': 'ndc',
        'product_name': 'name',
        'size': 'package_size',
        'active': 'is_active',
    })


CATALOG_CONFIG = CatalogConfig()


# =============================================================================
# VALIDATION CONFIGURATION
# =============================================================================

@dataclass
class ValidationConfig:
    """Request validation limits."""

    min_days_supply: int = 1
    max_days_supply: int = 365


VALIDATION_CONFIG = ValidationConfig()


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def load_sig_patterns(path: Path = None) -> Dict:
    """Load SIG unit vocabulary and frequency rules from YAML."""
    with open(path or SIG_CONFIG.patterns_file, 'r') as f:
        return yaml.safe_load(f)


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    print("=" * 60)
    print("NDC Calculator Configuration")
    print("=" * 60)
    print(f"\nPackage Root: {PACKAGE_ROOT}")
    print(f"SIG Patterns: {SIG_PATTERNS_YAML}")
    patterns = load_sig_patterns()
    print(f"\nUnits: {', '.join(patterns['units'])}")
    print("Frequencies:")
    for rule in patterns['frequencies']:
        print(f"  {rule['name']}: {rule['per_day']}/day")
    print(f"\nSingle-pack tolerance: {OPTIMIZER_CONFIG.single_pack_tolerance:.0%} of size")
    print(f"Multi-pack tolerance: {OPTIMIZER_CONFIG.multi_pack_optimal_tolerance:.0%} of quantity")
    print(f"Multi-pack max overfill: {OPTIMIZER_CONFIG.multi_pack_max_overfill:.0%} of quantity")
    print(f"Max days supply: {VALIDATION_CONFIG.max_days_supply}")
    print("=" * 60)
