# models.py
"""
Data Models
===========

Transient value types shared by the parser, classifier, calculator and
package optimizer. Nothing here holds state between requests.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class FormCategory(str, Enum):
    """Closed set of dosage-form categories driving rounding and packing."""

    TABLET = 'tablet'
    CAPSULE = 'capsule'
    LIQUID = 'liquid'
    INSULIN = 'insulin'
    INHALER = 'inhaler'
    OTHER = 'other'


class FailureKind(str, Enum):
    """Failure kinds returned (never raised) across component boundaries."""

    # Core
    EMPTY_INPUT = 'EMPTY_INPUT'
    NO_QUANTITY_UNIT = 'NO_QUANTITY_UNIT'
    INVALID_DAYS_SUPPLY = 'INVALID_DAYS_SUPPLY'
    NO_RECORDS = 'NO_RECORDS'
    NO_MATCHES = 'NO_MATCHES'

    # Orchestration / collaborators
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    NOT_FOUND = 'NOT_FOUND'
    NETWORK_ERROR = 'NETWORK_ERROR'
    NOT_SUPPORTED = 'NOT_SUPPORTED'


@dataclass(frozen=True)
class Failure:
    """Typed failure value."""

    kind: FailureKind
    message: str = ""
    details: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PackageRecord:
    """One package (NDC) as supplied by the catalog."""

    ndc: str
    name: str
    dosage_form: str
    strength: str
    package_size: float
    unit: str
    is_active: bool = True
    brand_name: Optional[str] = None
    generic_name: Optional[str] = None
    package_description: Optional[str] = None
    listed_date: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'ndc': self.ndc,
            'name': self.name,
            'dosage_form': self.dosage_form,
            'strength': self.strength,
            'package_size': self.package_size,
            'unit': self.unit,
            'is_active': self.is_active,
            'brand_name': self.brand_name,
            'generic_name': self.generic_name,
            'package_description': self.package_description,
            'listed_date': self.listed_date,
        }


@dataclass(frozen=True)
class ParsedDose:
    """Structured dose extracted from a SIG."""

    quantity: float
    frequency: float  # doses per day
    unit: str

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {self.quantity!r}")
        if self.frequency < 0:
            raise ValueError(f"frequency must be non-negative, got {self.frequency!r}")


@dataclass(frozen=True)
class MultiPackEntry:
    """One (package, count) pair of a multi-pack combination."""

    record: PackageRecord
    count: int


@dataclass(frozen=True)
class MatchCandidate:
    """A ranked way of filling the required quantity."""

    record: PackageRecord
    quantity_needed: float
    packages_needed: int
    overfill: float = 0.0
    underfill: Optional[float] = None
    is_optimal: bool = False
    multi_pack: Optional[Tuple[MultiPackEntry, ...]] = None

    @property
    def is_multi_pack(self) -> bool:
        return self.multi_pack is not None

    @property
    def is_exact(self) -> bool:
        return self.overfill == 0 and not self.underfill

    @property
    def dispensed(self) -> float:
        if self.multi_pack is not None:
            return sum(e.record.package_size * e.count for e in self.multi_pack)
        return self.packages_needed * self.record.package_size

    def breakdown(self) -> str:
        """Human readable package breakdown, e.g. '2 x 30 tablet + 1 x 10 tablet'."""
        entries = self.multi_pack or (MultiPackEntry(self.record, self.packages_needed),)
        return " + ".join(
            f"{e.count} x {e.record.package_size:g} {e.record.unit}" for e in entries
        )


@dataclass(frozen=True)
class ResolvedName:
    """Canonical identifier and normalized name from the name resolver."""

    identifier: str
    name: str


@dataclass(frozen=True)
class RelatedDrug:
    identifier: str
    name: str


@dataclass
class PrescriptionRequest:
    """Caller input to the prescription pipeline."""

    sig: str
    days_supply: Optional[int]
    drug_name: Optional[str] = None
    ndc: Optional[str] = None


@dataclass
class PrescriptionResult:
    """Pipeline output: quantity, ranked matches and advisories."""

    drug_name: str
    total_quantity: float
    unit: str
    category: FormCategory
    matches: List[MatchCandidate] = field(default_factory=list)
    identifier: Optional[str] = None
    related_drugs: List[RelatedDrug] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
