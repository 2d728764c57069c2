"""ndc_calculator - SIG parsing, dispensing quantity and NDC package optimization"""

__version__ = "0.1.0"

from ndc_calculator.models import (
    Failure,
    FailureKind,
    FormCategory,
    MatchCandidate,
    MultiPackEntry,
    PackageRecord,
    ParsedDose,
    PrescriptionRequest,
    PrescriptionResult,
)
from ndc_calculator.extractors.sig_parser import parse_sig
from ndc_calculator.transformers.form_classifier import classify_dosage_form
from ndc_calculator.transformers.quantity_calculator import calculate_total_quantity
from ndc_calculator.transformers.package_optimizer import find_optimal_packages
from ndc_calculator.pipeline import PrescriptionPipeline

__all__ = [
    "Failure",
    "FailureKind",
    "FormCategory",
    "MatchCandidate",
    "MultiPackEntry",
    "PackageRecord",
    "ParsedDose",
    "PrescriptionRequest",
    "PrescriptionResult",
    "parse_sig",
    "classify_dosage_form",
    "calculate_total_quantity",
    "find_optimal_packages",
    "PrescriptionPipeline",
]
