"""
Version d'API d'un backend et regles de compatibilite.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence


class CompatibilityMode(str, Enum):
    """
    Tolerance appliquee a une version non listee.

    - STRICT : seule une correspondance exacte est compatible
    - LOOSE : meme version majeure qu'une version supportee
    - FALLBACK : comme LOOSE, et une version non detectee reste compatible
    """

    STRICT = "strict"
    LOOSE = "loose"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ApiVersionResult:
    """
    Resultat de la negociation de version, calcule une fois par client.

    Attributs :
        version : Version normalisee major.minor.patch (ou version de repli)
        detected : False si la version de repli a ete substituee
        is_supported : Version presente dans la table des versions supportees
        is_compatible : Version utilisable selon le mode de compatibilite
        warnings : Avertissements (jamais bloquants)
    """

    version: str
    detected: bool
    is_supported: bool
    is_compatible: bool
    warnings: tuple[str, ...] = field(default_factory=tuple)


_VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)")


def clean_version_string(raw: Optional[str]) -> Optional[str]:
    """
    Extrait le prefixe major.minor.patch d'une chaine de version.

    Example:
        >>> clean_version_string("3.0.0.4821")
        '3.0.0'
        >>> clean_version_string("not-a-version") is None
        True
    """
    if not raw:
        return None
    match = _VERSION_PATTERN.match(raw.strip())
    if match is None:
        return None
    return ".".join(match.groups())


def major_version(version: str) -> Optional[int]:
    cleaned = clean_version_string(version)
    if cleaned is None:
        return None
    return int(cleaned.split(".", 1)[0])


def evaluate_version(
    version: str,
    detected: bool,
    supported_versions: Sequence[str],
    mode: CompatibilityMode,
) -> ApiVersionResult:
    """
    Determine support et compatibilite d'une version.

    Args:
        version: Version normalisee (detectee ou de repli)
        detected: True si la version provient du backend
        supported_versions: Table des versions testees
        mode: Mode de compatibilite du client

    Returns:
        ApiVersionResult avec les avertissements correspondants
    """
    warnings: list[str] = []
    supported = [clean_version_string(v) for v in supported_versions]
    is_supported = version in supported

    if is_supported:
        is_compatible = True
    elif mode is CompatibilityMode.STRICT:
        is_compatible = False
    else:
        major = major_version(version)
        is_compatible = major is not None and any(
            major_version(v) == major for v in supported if v
        )

    if not detected:
        warnings.append(f"API version could not be detected; assuming {version}")
        if mode is CompatibilityMode.FALLBACK:
            is_compatible = True
    elif not is_supported and is_compatible:
        warnings.append(f"API version {version} is not in the tested list; running in compatibility mode")
    elif not is_compatible:
        warnings.append(f"API version {version} is not compatible ({mode.value} mode)")

    return ApiVersionResult(
        version=version,
        detected=detected,
        is_supported=is_supported,
        is_compatible=is_compatible,
        warnings=tuple(warnings),
    )
