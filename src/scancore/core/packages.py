"""Package ecosystem detection from manifest file names.

Matching is a case-insensitive substring test so callers can pass a bare file
name or a full path (``backend/go.sum``). The first matching ecosystem wins.
"""

from enum import Enum


class PackageType(str, Enum):
    """Package ecosystem identifiers."""

    MAVEN = "maven"
    NPM = "npm"
    PYPI = "pip"
    GO = "gomod"
    CARGO = "cargo"
    NUGET = "nuget"
    GEM = "gem"
    COMPOSER = "composer"


_MANIFEST_MARKERS: tuple[tuple[PackageType, tuple[str, ...]], ...] = (
    (PackageType.MAVEN, ("pom.xml", ".pom")),
    (PackageType.NPM, ("package.json", "package-lock.json", "yarn.lock")),
    (PackageType.PYPI, ("requirements.txt", "setup.py", "pipfile", "pyproject.toml")),
    (PackageType.GO, ("go.mod", "go.sum")),
    (PackageType.CARGO, ("cargo.toml", "cargo.lock")),
    (PackageType.NUGET, (".csproj", "packages.config", ".nuspec")),
    (PackageType.GEM, ("gemfile", ".gemspec")),
    (PackageType.COMPOSER, ("composer.json", "composer.lock")),
)


def detect_package_type(filename: str) -> PackageType | None:
    """Detect the package ecosystem of a manifest file.

    Args:
        filename: Manifest name or path (e.g. "backend/go.sum", "Pipfile.lock")

    Returns:
        PackageType, or None when no known manifest marker matches

    Example:
        >>> detect_package_type("services/api/package-lock.json")
        <PackageType.NPM: 'npm'>
    """
    lower = filename.lower()
    for package_type, markers in _MANIFEST_MARKERS:
        if any(marker in lower for marker in markers):
            return package_type
    return None
