"""Compliance framework descriptors.

Each framework is described once: which rule field holds its control
IDs, whether geographic distribution is tracked, and optional hooks that
fill framework-specific counters. The aggregation engine is shared.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from soclens.core.errors import UnknownFrameworkError
from soclens.models.log import NormalizedLog

# stats field name -> counter
Extensions = dict[str, dict[str, int]]


@dataclass(frozen=True)
class FrameworkDescriptor:
    """How one compliance framework is aggregated."""

    framework_id: str
    name: str
    control_field: str
    tracks_geo: bool = False
    counters: dict[str, tuple[str, ...]] = field(default_factory=dict)
    on_control: Callable[[str, Extensions], None] | None = None
    on_log: Callable[[NormalizedLog, Extensions], None] | None = None

    def controls(self, entry: NormalizedLog) -> list[str]:
        """Control IDs a log carries for this framework."""
        return entry.rule.controls(self.control_field)

    def new_extensions(self) -> Extensions:
        """Fresh framework-specific counters.

        Counters with fixed categories start with every key at zero.
        """
        return {name: dict.fromkeys(keys, 0) for name, keys in self.counters.items()}


# NIST 800-53

NIST_FAMILIES = {
    "AC": "Access Control",
    "AT": "Awareness and Training",
    "AU": "Audit and Accountability",
    "CA": "Assessment, Authorization, and Monitoring",
    "CM": "Configuration Management",
    "CP": "Contingency Planning",
    "IA": "Identification and Authentication",
    "IR": "Incident Response",
    "MA": "Maintenance",
    "MP": "Media Protection",
    "PE": "Physical and Environmental Protection",
    "PL": "Planning",
    "PM": "Program Management",
    "PS": "Personnel Security",
    "RA": "Risk Assessment",
    "SA": "System and Services Acquisition",
    "SC": "System and Communications Protection",
    "SI": "System and Information Integrity",
}


def control_family(control: str) -> str:
    """Map a NIST control ID such as "AC-2" to its family name."""
    if not control:
        return "Unknown"
    code = control.split("-")[0]
    return NIST_FAMILIES.get(code, f"{code} Family")


def _count_nist_family(control: str, extensions: Extensions) -> None:
    families = extensions["control_families"]
    family = control_family(control)
    families[family] = families.get(family, 0) + 1


# PCI-DSS
# Substring heuristics over free-text descriptions. Approximate: "pin"
# also matches words like "ping" or "shipping".

CARD_DATA_PATTERNS = {
    "Card Number Exposure": ("card number", "pan"),
    "CVV Exposure": ("cvv", "security code"),
    "Magnetic Track Data": ("track data", "magnetic stripe"),
    "Card PIN": ("pin", "personal identification number"),
    "Cardholder Data Storage": ("storage", "store"),
    "Unencrypted Transmission": ("encrypt", "transmission"),
    "Unauthorized Access": ("access", "unauthorized"),
}


def card_data_categories(description: str) -> list[str]:
    """Card-data violation categories suggested by a rule description."""
    text = description.lower()
    return [
        category
        for category, needles in CARD_DATA_PATTERNS.items()
        if any(needle in text for needle in needles)
    ]


def _count_card_data(entry: NormalizedLog, extensions: Extensions) -> None:
    stats = extensions["card_data_statistics"]
    for category in card_data_categories(entry.rule.description):
        stats[category] += 1


# GDPR

DSR_TYPES = (
    "Access",
    "Rectification",
    "Erasure",
    "Restriction",
    "Portability",
    "Object",
    "Automated Decision",
)


def _count_dsr_type(entry: NormalizedLog, extensions: Extensions) -> None:
    # Untagged or unrecognised requests stay uncategorized.
    requests = extensions["data_subject_request_types"]
    if entry.rule.dsr_type in requests:
        requests[entry.rule.dsr_type] += 1


# AICPA Trust Services Criteria
# Order matters: "PI" must be tested before "P", and "CC" before "C".

TSC_PREFIXES = (
    ("CC", "Security"),
    ("A", "Availability"),
    ("PI", "Processing Integrity"),
    ("C", "Confidentiality"),
    ("P", "Privacy"),
)


def tsc_category(criterion: str) -> tuple[str, str] | None:
    """Return (prefix, category) for a TSC criterion, or None."""
    for prefix, category in TSC_PREFIXES:
        if criterion.startswith(prefix):
            return prefix, category
    return None


def _count_tsc_category(criterion: str, extensions: Extensions) -> None:
    match = tsc_category(criterion)
    if match is None:
        return
    prefix, category = match
    extensions["control_distribution"][prefix] += 1
    extensions["category_distribution"][category] += 1


FRAMEWORKS: dict[str, FrameworkDescriptor] = {}


def register(descriptor: FrameworkDescriptor) -> FrameworkDescriptor:
    """Register a framework descriptor under its identifier."""
    FRAMEWORKS[descriptor.framework_id] = descriptor
    return descriptor


def get_framework(framework_id: str) -> FrameworkDescriptor:
    """Look up a framework descriptor.

    Raises:
        UnknownFrameworkError: If the identifier is not registered
    """
    descriptor = FRAMEWORKS.get(framework_id)
    if descriptor is None:
        raise UnknownFrameworkError(framework_id, list(FRAMEWORKS))
    return descriptor


register(FrameworkDescriptor(
    framework_id="hipaa",
    name="HIPAA",
    control_field="hipaa",
))

register(FrameworkDescriptor(
    framework_id="pci_dss",
    name="PCI-DSS",
    control_field="pci_dss",
    tracks_geo=True,
    counters={"card_data_statistics": tuple(CARD_DATA_PATTERNS)},
    on_log=_count_card_data,
))

register(FrameworkDescriptor(
    framework_id="gdpr",
    name="GDPR",
    control_field="gdpr",
    tracks_geo=True,
    counters={"data_subject_request_types": DSR_TYPES},
    on_log=_count_dsr_type,
))

register(FrameworkDescriptor(
    framework_id="nist_800_53",
    name="NIST 800-53",
    control_field="nist_800_53",
    counters={"control_families": ()},
    on_control=_count_nist_family,
))

register(FrameworkDescriptor(
    framework_id="tsc",
    name="TSC",
    control_field="tsc",
    counters={
        "control_distribution": tuple(prefix for prefix, _ in TSC_PREFIXES),
        "category_distribution": tuple(category for _, category in TSC_PREFIXES),
    },
    on_control=_count_tsc_category,
))

FRAMEWORK_IDS = tuple(FRAMEWORKS)
