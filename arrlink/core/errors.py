"""
Taxonomie des erreurs d'arrlink.

Toute erreur remontee par le pipeline de requetes est une sous-classe de
ApiError. Le caractere retryable et le delai par defaut sont des proprietes
derivees de la variante (jamais stockees), ce qui garantit qu'une meme
variante se comporte toujours de la meme facon.

Hierarchie :
    ArrLinkError
    +-- ApiError
    |   +-- AuthenticationError        (401/403, non retryable)
    |   +-- RateLimitError             (429, Retry-After sinon 30s)
    |   +-- ServiceUnavailableError    (5xx, 5 a 20s selon le statut)
    |   |   +-- CircuitOpenError       (circuit ouvert, aucun appel emis)
    |   +-- NotFoundError              (404, une seule relance, 2s)
    |   +-- ApiValidationError         (400/422, HTML au lieu de JSON)
    |   +-- NetworkError               (erreur de transport, 10 a 30s)
    |   +-- MalformedResponseError     (JSON illisible, non retryable)
    +-- DeadlineExceededError
    +-- SelectionValidationError
    +-- InvalidSearchQueryError
    +-- MonitoringError
"""

from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional, Sequence

from arrlink.core.backends import BackendKind

if TYPE_CHECKING:
    from arrlink.core.value_objects.selection import SelectionIssue


class ErrorKind(str, Enum):
    """Etiquette de chaque variante d'ApiError."""

    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    SERVICE_UNAVAILABLE = "service_unavailable"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    NETWORK = "network"
    MALFORMED = "malformed"


class ArrLinkError(Exception):
    """Exception racine du package."""


class ApiError(ArrLinkError):
    """
    Erreur terminale d'un appel a un backend.

    Attributes:
        service: Backend concerne (None si inconnu)
        correlation_id: Identifiant de correlation de l'operation logique
        status_code: Statut HTTP a l'origine de l'erreur, si applicable
    """

    kind: ClassVar[ErrorKind]

    def __init__(
        self,
        message: str,
        *,
        service: Optional[BackendKind] = None,
        correlation_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.service = service
        self.correlation_id = correlation_id
        self.status_code = status_code

    @property
    def is_retryable(self) -> bool:
        return False

    @property
    def retry_delay(self) -> Optional[float]:
        """Delai par defaut en secondes avant relance, None si non retryable."""
        return None

    @property
    def service_name(self) -> str:
        return self.service.display_name if self.service else "Media service"

    def user_message(self) -> str:
        """Message affichable a l'utilisateur, sans detail technique."""
        return f"{self.service_name} request failed. Please try again."

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, service={self.service}, "
            f"status_code={self.status_code})"
        )


class AuthenticationError(ApiError):
    kind = ErrorKind.AUTHENTICATION

    def user_message(self) -> str:
        return (
            f"{self.service_name} authentication failed. "
            "Please contact an administrator to check API configuration."
        )


class RateLimitError(ApiError):
    """
    Le backend limite le debit (429).

    Attributes:
        retry_after: Secondes demandees par l'en-tete Retry-After, ou None
    """

    kind = ErrorKind.RATE_LIMIT
    DEFAULT_DELAY = 30.0

    def __init__(self, message: str, *, retry_after: Optional[float] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after

    @property
    def is_retryable(self) -> bool:
        return True

    @property
    def retry_delay(self) -> float:
        return self.retry_after if self.retry_after is not None else self.DEFAULT_DELAY

    def user_message(self) -> str:
        seconds = int(round(self.retry_delay))
        plural = "s" if seconds != 1 else ""
        return f"{self.service_name} is busy. Please try again in {seconds} second{plural}."


class ServiceUnavailableError(ApiError):
    """Erreur serveur 5xx. Le delai croit avec la gravite du statut."""

    kind = ErrorKind.SERVICE_UNAVAILABLE
    DELAYS: ClassVar[dict[int, float]] = {500: 5.0, 502: 10.0, 503: 15.0, 504: 20.0}
    DEFAULT_DELAY = 10.0

    @property
    def is_retryable(self) -> bool:
        return True

    @property
    def retry_delay(self) -> float:
        return self.DELAYS.get(self.status_code, self.DEFAULT_DELAY)

    def user_message(self) -> str:
        return f"{self.service_name} is temporarily unavailable. Please try again shortly."


class CircuitOpenError(ServiceUnavailableError):
    """Le circuit du client est ouvert : l'appel est refuse sans requete reseau."""

    @property
    def is_retryable(self) -> bool:
        return False

    @property
    def retry_delay(self) -> None:
        return None


class NotFoundError(ApiError):
    """
    Ressource introuvable (404). Relancee une seule fois, apres un court delai,
    pour absorber la latence de propagation cote backend.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        *,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id

    @property
    def is_retryable(self) -> bool:
        return True

    @property
    def retry_delay(self) -> float:
        return 2.0

    def user_message(self) -> str:
        return (
            f"{self.resource_type} not found in {self.service_name}. "
            "Please verify your search criteria."
        )


class ApiValidationError(ApiError):
    """Requete rejetee (400/422) ou reponse HTML a la place du JSON attendu."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, details: Optional[str] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.details = details

    def user_message(self) -> str:
        return f"Invalid request to {self.service_name}. Please check your input and try again."


class NetworkError(ApiError):
    """
    Erreur de transport (connexion refusee, DNS, timeout, coupure).

    Attributes:
        code: Code de type errno (ECONNREFUSED, ETIMEDOUT, ...)
    """

    kind = ErrorKind.NETWORK
    DELAYS: ClassVar[dict[str, float]] = {
        "ECONNREFUSED": 30.0,
        "ENOTFOUND": 30.0,
        "ETIMEDOUT": 10.0,
        "ECONNABORTED": 10.0,
        "ECONNRESET": 15.0,
    }
    DEFAULT_DELAY = 15.0

    def __init__(self, message: str, *, code: str = "EUNKNOWN", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.code = code

    @property
    def is_retryable(self) -> bool:
        return True

    @property
    def retry_delay(self) -> float:
        return self.DELAYS.get(self.code, self.DEFAULT_DELAY)

    def user_message(self) -> str:
        if self.code in ("ECONNREFUSED", "ENOTFOUND"):
            return f"Cannot connect to {self.service_name}. The service may be offline."
        if self.code in ("ETIMEDOUT", "ECONNABORTED"):
            return f"{self.service_name} request timed out. Please try again."
        return f"Network error connecting to {self.service_name}. Please try again."


class MalformedResponseError(ApiError):
    """Reponse 2xx declaree JSON mais illisible. Une relance ne corrigerait rien."""

    kind = ErrorKind.MALFORMED

    def user_message(self) -> str:
        return f"{self.service_name} returned an unexpected response. Please try again later."


class DeadlineExceededError(ArrLinkError):
    """L'echeance globale d'une operation d'orchestration est depassee."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout
        detail = f" after {timeout:g}s" if timeout is not None else ""
        super().__init__(f"Operation deadline exceeded{detail}")

    def user_message(self) -> str:
        return "The operation took too long to complete. Please try again."


class SelectionValidationError(ArrLinkError):
    """
    Selection saison/episodes invalide.

    Attributes:
        issues: Liste de tous les problemes detectes (un par regle violee)
    """

    def __init__(self, issues: Sequence["SelectionIssue"]) -> None:
        self.issues = list(issues)
        super().__init__("; ".join(issue.message for issue in self.issues))


class InvalidSearchQueryError(ArrLinkError):
    """Terme de recherche rejete avant tout appel reseau."""


class MonitoringError(ArrLinkError):
    """Echec fatal d'une orchestration (cible introuvable, configuration absente)."""
