"""Tests for CVSS record selection across advisory sources."""

import pytest
from pydantic import ValidationError

from scancore.core.cvss import (
    CVSS_PRIORITY,
    CVSSRecord,
    CVSSSource,
    select_best_cvss,
)
from scancore.core.severity import Severity


def record(source: CVSSSource, score: float, vector: str = "") -> CVSSRecord:
    return CVSSRecord(source=source, score=score, vector=vector)


def test_priority_order():
    """Test NVD > GHSA > Red Hat > Bitnami."""
    assert CVSS_PRIORITY == (
        CVSSSource.NVD,
        CVSSSource.GHSA,
        CVSSSource.REDHAT,
        CVSSSource.BITNAMI,
    )


def test_priority_beats_magnitude():
    """Test that GHSA 5.0 wins over Red Hat 9.0."""
    records = {
        CVSSSource.GHSA: record(CVSSSource.GHSA, 5.0),
        CVSSSource.REDHAT: record(CVSSSource.REDHAT, 9.0),
    }

    best = select_best_cvss(records)

    assert best is not None
    assert best.source == CVSSSource.GHSA
    assert best.score == 5.0


def test_nvd_preferred_when_present():
    """Test that NVD wins over every other source."""
    records = {source: record(source, 7.5) for source in CVSSSource}
    records[CVSSSource.NVD] = record(CVSSSource.NVD, 3.1)

    assert select_best_cvss(records).source == CVSSSource.NVD


def test_zero_score_is_skipped():
    """Test that a zero score falls through to the next source."""
    records = {
        CVSSSource.NVD: record(CVSSSource.NVD, 0.0),
        CVSSSource.BITNAMI: record(CVSSSource.BITNAMI, 6.1),
    }

    assert select_best_cvss(records).source == CVSSSource.BITNAMI


def test_no_usable_record():
    """Test that empty or all-zero mappings select nothing."""
    assert select_best_cvss({}) is None
    assert select_best_cvss({s: record(s, 0.0) for s in CVSSSource}) is None


def test_string_keys_match_sources():
    """Test that plain string keys work since sources are str enums."""
    records = {"redhat": record(CVSSSource.REDHAT, 8.8)}

    assert select_best_cvss(records).score == 8.8


def test_selection_is_deterministic():
    """Test repeated selection returns the same record."""
    records = {s: record(s, 4.0 + i) for i, s in enumerate(reversed(CVSS_PRIORITY))}

    picks = {select_best_cvss(records).source for _ in range(10)}

    assert picks == {CVSSSource.NVD}


def test_record_validates_score_range():
    """Test that scores outside 0-10 are rejected."""
    with pytest.raises(ValidationError):
        record(CVSSSource.NVD, 10.5)
    with pytest.raises(ValidationError):
        record(CVSSSource.NVD, -0.1)


def test_record_is_frozen():
    """Test that records cannot be mutated after selection."""
    r = record(CVSSSource.NVD, 5.0)

    with pytest.raises(ValidationError):
        r.score = 9.0


def test_record_severity():
    """Test severity derived from the score."""
    assert record(CVSSSource.GHSA, 9.8).severity == Severity.CRITICAL
    assert record(CVSSSource.GHSA, 0.0).severity == Severity.INFO


def test_from_vector_cvss3():
    """Test base score computation for a CVSS v3.1 vector."""
    vector = "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H"

    r = CVSSRecord.from_vector("nvd", vector)

    assert r.source == CVSSSource.NVD
    assert r.score == 9.8
    assert r.vector == vector


def test_from_vector_cvss2():
    """Test base score computation for a CVSS v2 vector."""
    r = CVSSRecord.from_vector(CVSSSource.REDHAT, "AV:N/AC:L/Au:N/C:P/I:P/A:P")

    assert r.score == 7.5


def test_from_vector_rejects_garbage():
    """Test that malformed vectors raise ValueError."""
    with pytest.raises(ValueError):
        CVSSRecord.from_vector(CVSSSource.NVD, "not-a-vector")
