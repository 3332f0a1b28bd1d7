"""Tests for package ecosystem detection."""

import pytest

from scancore.core.packages import PackageType, detect_package_type


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("pom.xml", PackageType.MAVEN),
        ("libs/commons-io-2.11.0.pom", PackageType.MAVEN),
        ("frontend/package.json", PackageType.NPM),
        ("package-lock.json", PackageType.NPM),
        ("yarn.lock", PackageType.NPM),
        ("requirements.txt", PackageType.PYPI),
        ("Pipfile.lock", PackageType.PYPI),
        ("pyproject.toml", PackageType.PYPI),
        ("setup.py", PackageType.PYPI),
        ("backend/go.sum", PackageType.GO),
        ("go.mod", PackageType.GO),
        ("Cargo.lock", PackageType.CARGO),
        ("src/App/App.csproj", PackageType.NUGET),
        ("packages.config", PackageType.NUGET),
        ("Gemfile.lock", PackageType.GEM),
        ("mylib.gemspec", PackageType.GEM),
        ("COMPOSER.JSON", PackageType.COMPOSER),
        ("composer.lock", PackageType.COMPOSER),
    ],
)
def test_detect_package_type(filename, expected):
    """Test manifest markers, case-insensitive and path-tolerant."""
    assert detect_package_type(filename) == expected


@pytest.mark.parametrize("filename", ["README.md", "", "src/main.rs", "Dockerfile"])
def test_detect_package_type_unknown(filename):
    """Test that non-manifest files are unknown."""
    assert detect_package_type(filename) is None


def test_package_type_values():
    """Test the canonical ecosystem identifiers."""
    assert [p.value for p in PackageType] == [
        "maven", "npm", "pip", "gomod", "cargo", "nuget", "gem", "composer",
    ]
