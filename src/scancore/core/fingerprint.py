"""Stable fingerprints for finding deduplication.

A fingerprint is the SHA-256 hex digest of a ``:``-joined canonical string.
Identical inputs always produce the identical fingerprint, so findings from
repeated scans of an unchanged codebase can be matched up and diffed.

Fingerprints key on location and rule only. Moving a finding to another line
changes its fingerprint.
"""

import hashlib

FINGERPRINT_DELIMITER = ":"

# Secret fingerprints embed only this many hex chars of the secret's digest.
# Changing it invalidates every stored secret fingerprint.
SECRET_DIGEST_PREFIX_LENGTH = 8


def hash_string(value: str) -> str:
    """Return the SHA-256 hex digest of a UTF-8 string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def generate_sast_fingerprint(file: str, rule_id: str, start_line: int) -> str:
    """Fingerprint a static-analysis finding: ``sha256(file:ruleID:startLine)``."""
    return hash_string(
        FINGERPRINT_DELIMITER.join((file, rule_id, str(start_line)))
    )


def generate_sca_fingerprint(
    package_name: str, package_version: str, vulnerability_id: str
) -> str:
    """Fingerprint a dependency vulnerability: ``sha256(name:version:vulnID)``."""
    return hash_string(
        FINGERPRINT_DELIMITER.join((package_name, package_version, vulnerability_id))
    )


def generate_secret_fingerprint(
    file: str, rule_id: str, start_line: int, secret_value: str
) -> str:
    """Fingerprint a secret finding.

    Format: ``sha256(file:ruleID:startLine:secretHash)`` where ``secretHash``
    is the first 8 hex characters of ``sha256(secret_value)``. The fingerprint
    changes when the secret changes, but the secret itself is never stored.

    Args:
        file: File the secret was found in
        rule_id: Detector rule identifier
        start_line: Line of the match
        secret_value: Raw secret value

    Returns:
        64-character hex digest
    """
    secret_hash = hash_string(secret_value)[:SECRET_DIGEST_PREFIX_LENGTH]
    return hash_string(
        FINGERPRINT_DELIMITER.join((file, rule_id, str(start_line), secret_hash))
    )
