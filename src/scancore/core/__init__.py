"""Core finding normalization.

Provides:
- Fingerprints for deduplication across scans
- CVSS selection across advisory sources
- Severity and package ecosystem normalization
- Masking of secrets for display
- Canonical Finding model and builders
"""

from .cvss import CVSS_PRIORITY, CVSSRecord, CVSSSource, select_best_cvss
from .exceptions import ExecutionError, ScanCoreError, ScannerStartError, ScannerTimeoutError
from .fingerprint import (
    generate_sast_fingerprint,
    generate_sca_fingerprint,
    generate_secret_fingerprint,
    hash_string,
)
from .masking import mask_api_key, mask_secret
from .output import (
    Finding,
    FindingCategory,
    FindingDiff,
    build_sast_finding,
    build_sca_finding,
    build_secret_finding,
    deduplicate_findings,
    diff_findings,
)
from .packages import PackageType, detect_package_type
from .severity import Severity, max_severity, normalize_severity, severity_from_score, severity_rank

__all__ = [
    "CVSS_PRIORITY",
    "CVSSRecord",
    "CVSSSource",
    "select_best_cvss",
    "ExecutionError",
    "ScanCoreError",
    "ScannerStartError",
    "ScannerTimeoutError",
    "generate_sast_fingerprint",
    "generate_sca_fingerprint",
    "generate_secret_fingerprint",
    "hash_string",
    "mask_api_key",
    "mask_secret",
    "Finding",
    "FindingCategory",
    "FindingDiff",
    "build_sast_finding",
    "build_sca_finding",
    "build_secret_finding",
    "deduplicate_findings",
    "diff_findings",
    "PackageType",
    "detect_package_type",
    "Severity",
    "max_severity",
    "normalize_severity",
    "severity_from_score",
    "severity_rank",
]
