"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- BackendKind : Backend media (sonarr, radarr, emby)
- EpisodeSelection, MonitoringChange, MonitoringAction : selection et journal
- ApiVersionResult, CompatibilityMode : negociation de version
- OperationContext : identifiant de correlation et echeance
"""

from arrlink.core.value_objects.api_version import (
    ApiVersionResult,
    CompatibilityMode,
    clean_version_string,
    evaluate_version,
)
from arrlink.core.backends import BackendKind
from arrlink.core.value_objects.context import OperationContext, new_correlation_id
from arrlink.core.value_objects.search import validate_search_query
from arrlink.core.value_objects.selection import (
    EpisodeSelection,
    MonitoringAction,
    MonitoringChange,
    SelectionIssue,
    SelectionIssueCode,
    find_selection_issues,
    parse_selection,
    validate_selection,
)

__all__ = [
    "ApiVersionResult",
    "BackendKind",
    "CompatibilityMode",
    "EpisodeSelection",
    "MonitoringAction",
    "MonitoringChange",
    "OperationContext",
    "SelectionIssue",
    "SelectionIssueCode",
    "clean_version_string",
    "evaluate_version",
    "find_selection_issues",
    "new_correlation_id",
    "parse_selection",
    "validate_search_query",
    "validate_selection",
]
