"""Severity normalization for scanner findings.

Scanners do not share a vocabulary: Semgrep says ``ERROR``, npm audit says
``moderate``, SARIF says ``note``. Everything is folded into five canonical
levels here, either from a numeric CVSS score or from a free-text label.

Provides:
- Severity: Enum for canonical severity levels
- severity_from_score: CVSS score to severity level
- normalize_severity: Scanner label to severity level
- severity_rank / max_severity: Ordering helpers
"""

from collections.abc import Iterable
from enum import Enum
from types import MappingProxyType


class Severity(str, Enum):
    """Canonical severity levels, lowest to highest."""

    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


_LABELS = MappingProxyType({
    "CRITICAL": Severity.CRITICAL,
    "HIGH": Severity.HIGH,
    "ERROR": Severity.HIGH,
    "MEDIUM": Severity.MEDIUM,
    "MODERATE": Severity.MEDIUM,
    "WARNING": Severity.MEDIUM,
    "LOW": Severity.LOW,
    "INFO": Severity.INFO,
    "INFORMATIONAL": Severity.INFO,
    "NOTE": Severity.INFO,
})

_RANKS = MappingProxyType({level: rank for rank, level in enumerate(Severity)})


def severity_from_score(score: float) -> Severity:
    """Map a CVSS score to a severity level.

    Each band includes its lower bound:
    critical >= 9.0, high >= 7.0, medium >= 4.0, low > 0, otherwise info.

    Args:
        score: CVSS base score (anything outside 0-10 is still accepted)

    Returns:
        Severity level

    Example:
        >>> severity_from_score(7.0)
        <Severity.HIGH: 'high'>
    """
    if score >= 9.0:
        return Severity.CRITICAL
    if score >= 7.0:
        return Severity.HIGH
    if score >= 4.0:
        return Severity.MEDIUM
    if score > 0:
        return Severity.LOW
    return Severity.INFO


def normalize_severity(label: str | None) -> Severity:
    """Normalize a scanner-emitted severity label.

    Case-insensitive and whitespace-trimmed. Unknown or empty labels map to
    ``Severity.INFO`` so that output from unfamiliar tools never fails.

    Args:
        label: Free-text severity from a scanner (e.g. "ERROR", " moderate ")

    Returns:
        Severity level
    """
    if not label:
        return Severity.INFO
    return _LABELS.get(label.strip().upper(), Severity.INFO)


def severity_rank(level: Severity | str) -> int:
    """Return the ordinal rank of a level (info=0 ... critical=4).

    Plain strings go through ``normalize_severity`` first.
    """
    if not isinstance(level, Severity):
        level = normalize_severity(level)
    return _RANKS[level]


def max_severity(levels: Iterable[Severity | str]) -> Severity:
    """Return the highest severity among levels, or info when empty."""
    highest = Severity.INFO
    for level in levels:
        if severity_rank(level) > severity_rank(highest):
            highest = level if isinstance(level, Severity) else normalize_severity(level)
    return highest
