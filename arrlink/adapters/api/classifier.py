"""
Classification des echecs HTTP et transport en ApiError.

classify() est deterministe et sans etat : les memes entrees produisent
toujours la meme variante avec les memes attributs. Le statut HTTP est
prioritaire sur l'exception de transport.

Table de correspondance :
    401/403         -> AuthenticationError
    404             -> NotFoundError
    400/422 (4xx)   -> ApiValidationError
    408             -> NetworkError(ETIMEDOUT)
    429             -> RateLimitError (Retry-After en secondes)
    5xx             -> ServiceUnavailableError
    redirections    -> ApiValidationError (boucle de redirection de login)
    transport       -> NetworkError (code de type errno)
"""

import asyncio
import errno
from typing import Mapping, Optional

import httpx

from arrlink.core.backends import BackendKind
from arrlink.core.errors import (
    ApiError,
    ApiValidationError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
)

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated",
)


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Lit un en-tete Retry-After exprime en secondes.

    Le format date HTTP n'est pas interprete (il rendrait le resultat
    dependant de l'heure courante) : la valeur par defaut s'applique.
    """
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def network_code_for(error: BaseException) -> str:
    """Code de type errno correspondant a une erreur de transport."""
    if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
        return "ETIMEDOUT"
    if isinstance(error, httpx.ConnectError):
        text = str(error).lower()
        if any(marker in text for marker in _DNS_MARKERS):
            return "ENOTFOUND"
        return "ECONNREFUSED"
    if isinstance(error, (httpx.RemoteProtocolError, httpx.ReadError, httpx.WriteError)):
        return "ECONNRESET"
    if isinstance(error, OSError) and error.errno in errno.errorcode:
        return errno.errorcode[error.errno]
    return "EUNKNOWN"


def classify(
    error: Optional[BaseException] = None,
    status_code: Optional[int] = None,
    *,
    headers: Optional[Mapping[str, str]] = None,
    service: Optional[BackendKind] = None,
    correlation_id: Optional[str] = None,
    resource_type: str = "Resource",
    resource_id: Optional[str] = None,
    details: Optional[str] = None,
) -> ApiError:
    """
    Convertit un echec brut en ApiError.

    Args:
        error: Exception de transport (httpx, OSError, timeout), si applicable
        status_code: Statut HTTP de la reponse en echec, si applicable
        headers: En-tetes de la reponse (pour Retry-After)
        service: Backend appele
        correlation_id: Identifiant de correlation de l'operation
        resource_type: Type de ressource pour les 404 (ex: "Series")
        resource_id: Identifiant de la ressource pour les 404
        details: Detail technique pour les erreurs de validation

    Returns:
        Variante d'ApiError correspondante

    Example:
        >>> classify(status_code=503).retry_delay
        15.0
        >>> classify(httpx.ConnectError("refused")).code
        'ECONNREFUSED'
    """
    common = {"service": service, "correlation_id": correlation_id, "status_code": status_code}

    if status_code is not None:
        if status_code in (401, 403):
            return AuthenticationError(f"HTTP {status_code}: authentication rejected", **common)
        if status_code == 404:
            return NotFoundError(
                f"HTTP 404: {resource_type} not found",
                resource_type=resource_type,
                resource_id=resource_id,
                **common,
            )
        if status_code == 408:
            return NetworkError("HTTP 408: request timeout", code="ETIMEDOUT", **common)
        if status_code == 429:
            retry_after = parse_retry_after((headers or {}).get("Retry-After"))
            return RateLimitError("HTTP 429: rate limited", retry_after=retry_after, **common)
        if status_code >= 500:
            return ServiceUnavailableError(f"HTTP {status_code}: service unavailable", **common)
        if 400 <= status_code < 500:
            return ApiValidationError(
                f"HTTP {status_code}: request rejected", details=details, **common
            )

    if isinstance(error, httpx.TooManyRedirects):
        return ApiValidationError(
            "Too many redirects",
            details="Redirect loop while following the response (likely an authentication redirect)",
            **common,
        )

    if error is not None:
        code = network_code_for(error)
        return NetworkError(f"{type(error).__name__}: {code}", code=code, **common)

    return ApiValidationError(
        f"Unexpected HTTP status {status_code}", details=details, **common
    )
