"""CVSS score handling across advisory sources.

Dependency scanners often report several scores for one vulnerability (NVD,
GitHub, distro and container vendors). They regularly disagree, so one record
is chosen by a fixed trust order rather than by magnitude.

Provides:
- CVSSSource: Enum of supported advisory sources
- CVSSRecord: One source's score and vector
- CVSS_PRIORITY: Source priority, most authoritative first
- select_best_cvss: Pick the authoritative record from a source mapping
"""

from collections.abc import Mapping
from enum import Enum

from cvss import CVSS2, CVSS3
from cvss.exceptions import CVSSError
from pydantic import BaseModel, ConfigDict, Field

from scancore.core.severity import Severity, severity_from_score


class CVSSSource(str, Enum):
    """Advisory source of a CVSS record."""

    NVD = "nvd"  # National Vulnerability Database
    GHSA = "ghsa"  # GitHub Security Advisory
    REDHAT = "redhat"
    BITNAMI = "bitnami"


# NVD > GHSA > Red Hat > Bitnami
CVSS_PRIORITY: tuple[CVSSSource, ...] = (
    CVSSSource.NVD,
    CVSSSource.GHSA,
    CVSSSource.REDHAT,
    CVSSSource.BITNAMI,
)


class CVSSRecord(BaseModel):
    """One advisory source's opinion on a vulnerability.

    Attributes:
        source: Advisory source that published the score
        score: CVSS base score (0.0 - 10.0)
        vector: CVSS vector string, may be empty when only a score is known
    """

    model_config = ConfigDict(frozen=True)

    source: CVSSSource
    score: float = Field(ge=0.0, le=10.0)
    vector: str = ""

    @property
    def severity(self) -> Severity:
        """Severity level implied by the score."""
        return severity_from_score(self.score)

    @classmethod
    def from_vector(cls, source: CVSSSource | str, vector: str) -> "CVSSRecord":
        """Build a record by computing the base score of a vector.

        Vectors starting with ``CVSS:3`` are scored as CVSS v3.x, anything
        else as CVSS v2.

        Args:
            source: Advisory source
            vector: CVSS vector string,
                e.g. "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H"

        Returns:
            CVSSRecord with the computed base score

        Raises:
            ValueError: If the vector cannot be parsed

        Example:
            >>> record = CVSSRecord.from_vector(
            ...     "nvd", "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H"
            ... )
            >>> record.score
            9.8
        """
        vector = vector.strip()
        try:
            if vector.upper().startswith("CVSS:3"):
                score = CVSS3(vector).base_score
            else:
                score = CVSS2(vector).base_score
        except CVSSError as e:
            raise ValueError(f"invalid CVSS vector {vector!r}: {e}") from e
        return cls(source=CVSSSource(source), score=float(score), vector=vector)


def select_best_cvss(
    records: Mapping[CVSSSource, CVSSRecord],
) -> CVSSRecord | None:
    """Select the authoritative CVSS record.

    Walks ``CVSS_PRIORITY`` and returns the first record that is present with
    a strictly positive score. Priority wins over magnitude: a GHSA 5.0 is
    preferred to a Red Hat 9.0.

    Args:
        records: Records keyed by source (plain string keys such as "nvd"
            also match, since CVSSSource is a str enum)

    Returns:
        The selected record, or None if no source has a usable score
    """
    for source in CVSS_PRIORITY:
        record = records.get(source)
        if record is not None and record.score > 0:
            return record
    return None
