"""
Tests unitaires pour les regles de compatibilite de version d'API.
"""

import pytest

from arrlink.core.value_objects.api_version import (
    CompatibilityMode,
    clean_version_string,
    evaluate_version,
    major_version,
)

SUPPORTED = ("3.0.0", "4.0.0")


class TestCleanVersionString:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("4.0.2.1183", "4.0.2"),
            ("v3.1.0", "3.1.0"),
            (" 4.8.1.0 ", "4.8.1"),
            ("4.0", None),
            ("not-a-version", None),
            ("", None),
            (None, None),
        ],
    )
    def test_clean(self, raw, expected) -> None:
        assert clean_version_string(raw) == expected

    def test_major_version(self) -> None:
        assert major_version("4.0.2") == 4
        assert major_version("garbage") is None


class TestEvaluateVersion:
    def test_supported_version(self) -> None:
        result = evaluate_version("4.0.0", True, SUPPORTED, CompatibilityMode.STRICT)
        assert result.is_supported and result.is_compatible
        assert result.warnings == ()

    def test_strict_rejects_unlisted_version(self) -> None:
        result = evaluate_version("4.1.0", True, SUPPORTED, CompatibilityMode.STRICT)
        assert not result.is_compatible
        assert "not compatible" in result.warnings[0]

    def test_loose_accepts_same_major(self) -> None:
        result = evaluate_version("4.1.0", True, SUPPORTED, CompatibilityMode.LOOSE)
        assert not result.is_supported
        assert result.is_compatible
        assert "compatibility mode" in result.warnings[0]

    def test_loose_rejects_other_major(self) -> None:
        result = evaluate_version("5.0.0", True, SUPPORTED, CompatibilityMode.LOOSE)
        assert not result.is_compatible

    def test_undetected_fallback_mode_stays_compatible(self) -> None:
        result = evaluate_version("9.0.0", False, SUPPORTED, CompatibilityMode.FALLBACK)
        assert not result.detected
        assert result.is_compatible
        assert "could not be detected" in result.warnings[0]

    def test_undetected_strict_mode(self) -> None:
        result = evaluate_version("9.0.0", False, SUPPORTED, CompatibilityMode.STRICT)
        assert not result.is_compatible
        assert len(result.warnings) == 1
