"""
NDC Calculator Configuration Package
"""

from .calculator_config import (
    # Paths
    PACKAGE_ROOT,
    CONFIG_DIR,
    SIG_PATTERNS_YAML,

    # Configs
    SIG_CONFIG,
    QUANTITY_CONFIG,
    OPTIMIZER_CONFIG,
    CATALOG_CONFIG,
    VALIDATION_CONFIG,

    # Helpers
    load_sig_patterns,
)

__all__ = [
    'PACKAGE_ROOT',
    'CONFIG_DIR',
    'SIG_PATTERNS_YAML',
    'SIG_CONFIG',
    'QUANTITY_CONFIG',
    'OPTIMIZER_CONFIG',
    'CATALOG_CONFIG',
    'VALIDATION_CONFIG',
    'load_sig_patterns',
]
