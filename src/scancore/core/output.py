"""Canonical finding model shared by all scanner result parsers.

Parsers for individual tools (Semgrep, Gitleaks, Trivy, ...) turn raw output
into Finding records through the builder functions here, which apply the
fingerprint, CVSS selection and severity normalization primitives
consistently.

Provides:
- FindingCategory: Enum for finding categories
- Finding: Normalized security finding
- build_sast_finding / build_secret_finding / build_sca_finding: Builders
- deduplicate_findings: Drop repeated fingerprints
- diff_findings: Compare two scans by fingerprint
"""

from collections.abc import Iterable, Mapping
from enum import Enum

from pydantic import BaseModel, Field

from scancore.core.cvss import CVSSRecord, CVSSSource, select_best_cvss
from scancore.core.fingerprint import (
    generate_sast_fingerprint,
    generate_sca_fingerprint,
    generate_secret_fingerprint,
)
from scancore.core.masking import mask_secret
from scancore.core.packages import PackageType, detect_package_type
from scancore.core.severity import Severity, normalize_severity


class FindingCategory(str, Enum):
    """Kind of scanner that produced a finding."""

    SAST = "sast"
    SECRET = "secret"
    SCA = "sca"


class Finding(BaseModel):
    """Normalized security finding.

    Location fields are set for SAST and secret findings, package fields for
    SCA findings. Secret values are only ever stored masked.

    Attributes:
        category: Finding category
        fingerprint: Stable dedup key (SHA-256 hex digest)
        severity: Canonical severity level
        tool_name: Scanner that reported the finding
        title: Short description
        rule_id: Scanner rule identifier (SAST/secret)
        file: File path (SAST/secret)
        start_line: Line number (SAST/secret)
        masked_secret: Display-safe secret (secret)
        package_name: Affected package (SCA)
        package_version: Installed version (SCA)
        vulnerability_id: CVE/GHSA identifier (SCA)
        package_type: Package ecosystem (SCA)
        cvss: Selected CVSS record (SCA)
    """

    category: FindingCategory
    fingerprint: str
    severity: Severity
    tool_name: str = ""
    title: str = ""
    rule_id: str | None = None
    file: str | None = None
    start_line: int | None = None
    masked_secret: str | None = None
    package_name: str | None = None
    package_version: str | None = None
    vulnerability_id: str | None = None
    package_type: PackageType | None = None
    cvss: CVSSRecord | None = None


class FindingDiff(BaseModel):
    """Result of comparing two scans.

    Attributes:
        new: Findings only in the current scan
        fixed: Findings only in the previous scan
        unchanged: Findings in both scans (current scan's copy)
    """

    new: list[Finding] = Field(default_factory=list)
    fixed: list[Finding] = Field(default_factory=list)
    unchanged: list[Finding] = Field(default_factory=list)


def build_sast_finding(
    file: str,
    rule_id: str,
    start_line: int,
    severity: str | None = None,
    tool_name: str = "",
    title: str = "",
) -> Finding:
    """Build a static-analysis finding.

    Args:
        file: File path as reported by the scanner
        rule_id: Rule identifier
        start_line: First line of the match
        severity: Scanner severity label (normalized, unknown -> info)
        tool_name: Scanner name
        title: Short description

    Returns:
        Finding with category SAST
    """
    return Finding(
        category=FindingCategory.SAST,
        fingerprint=generate_sast_fingerprint(file, rule_id, start_line),
        severity=normalize_severity(severity),
        tool_name=tool_name,
        title=title,
        rule_id=rule_id,
        file=file,
        start_line=start_line,
    )


def build_secret_finding(
    file: str,
    rule_id: str,
    start_line: int,
    secret_value: str,
    severity: str | None = "high",
    tool_name: str = "",
    title: str = "",
) -> Finding:
    """Build a secret finding.

    The raw secret feeds the fingerprint and is then discarded; only its
    masked form is kept on the record. Leaked secrets default to high.
    """
    return Finding(
        category=FindingCategory.SECRET,
        fingerprint=generate_secret_fingerprint(file, rule_id, start_line, secret_value),
        severity=normalize_severity(severity),
        tool_name=tool_name,
        title=title,
        rule_id=rule_id,
        file=file,
        start_line=start_line,
        masked_secret=mask_secret(secret_value),
    )


def build_sca_finding(
    package_name: str,
    package_version: str,
    vulnerability_id: str,
    cvss_records: Mapping[CVSSSource, CVSSRecord] | None = None,
    severity: str | None = None,
    manifest: str = "",
    tool_name: str = "",
    title: str = "",
) -> Finding:
    """Build a dependency vulnerability finding.

    The best CVSS record is selected by source priority. A scanner severity
    label takes precedence; without one the severity is derived from the
    selected CVSS score, falling back to info.

    Args:
        package_name: Affected package
        package_version: Installed version
        vulnerability_id: CVE/GHSA identifier
        cvss_records: CVSS records keyed by advisory source
        severity: Scanner severity label, if the scanner provides one
        manifest: Manifest file the package came from, used for ecosystem
        tool_name: Scanner name
        title: Short description

    Returns:
        Finding with category SCA
    """
    cvss = select_best_cvss(cvss_records or {})

    if severity:
        level = normalize_severity(severity)
    elif cvss is not None:
        level = cvss.severity
    else:
        level = Severity.INFO

    return Finding(
        category=FindingCategory.SCA,
        fingerprint=generate_sca_fingerprint(package_name, package_version, vulnerability_id),
        severity=level,
        tool_name=tool_name,
        title=title,
        package_name=package_name,
        package_version=package_version,
        vulnerability_id=vulnerability_id,
        package_type=detect_package_type(manifest) if manifest else None,
        cvss=cvss,
    )


def deduplicate_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Keep the first finding for each fingerprint, preserving input order."""
    seen: set[str] = set()
    unique = []
    for finding in findings:
        if finding.fingerprint in seen:
            continue
        seen.add(finding.fingerprint)
        unique.append(finding)
    return unique


def diff_findings(
    previous: Iterable[Finding], current: Iterable[Finding]
) -> FindingDiff:
    """Compare two scans by fingerprint.

    Both inputs are deduplicated first. Output lists keep input order.

    Args:
        previous: Findings from the earlier scan
        current: Findings from the later scan

    Returns:
        FindingDiff with new, fixed and unchanged findings
    """
    before = deduplicate_findings(previous)
    after = deduplicate_findings(current)
    before_keys = {f.fingerprint for f in before}
    after_keys = {f.fingerprint for f in after}

    return FindingDiff(
        new=[f for f in after if f.fingerprint not in before_keys],
        fixed=[f for f in before if f.fingerprint not in after_keys],
        unchanged=[f for f in after if f.fingerprint in before_keys],
    )
