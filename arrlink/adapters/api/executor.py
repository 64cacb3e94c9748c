"""
Execution d'un appel HTTP logique vers un backend.

Le RequestExecutor fusionne l'authentification du client, l'en-tete de
correlation et un timeout borne par l'echeance de l'operation, puis relance
l'appel selon la RetryPolicy (via tenacity). Chaque echec est classe en
ApiError : aucune exception httpx brute ne sort de ce module.

Chaque tentative et chaque appel logique produisent un RequestEvent transmis
a un observateur. L'observateur par defaut ecrit ces evenements dans loguru.

Usage:
    executor = RequestExecutor(config, ApiKeyHeaderAuth(api_key))
    series = await executor.execute("GET", "/api/v3/series", ctx=ctx)
    await executor.close()
"""

import asyncio
import random
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Mapping, Optional

import httpx
from loguru import logger
from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt

from arrlink.adapters.api.auth import AuthStrategy
from arrlink.adapters.api.circuit_breaker import CircuitBreaker
from arrlink.adapters.api.classifier import classify
from arrlink.adapters.api.client_config import ClientConfig
from arrlink.adapters.api.retry import RetryDecision, decide
from arrlink.core.backends import BackendKind
from arrlink.core.errors import (
    ApiError,
    ApiValidationError,
    CircuitOpenError,
    DeadlineExceededError,
    ErrorKind,
    MalformedResponseError,
)
from arrlink.core.value_objects.context import OperationContext
from arrlink.utils.timing import Clock, Deadline, SystemClock

CORRELATION_HEADER = "X-Correlation-ID"
SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


class RequestPhase(str, Enum):
    ATTEMPT_START = "attempt_start"
    ATTEMPT_END = "attempt_end"
    RETRY_SCHEDULED = "retry_scheduled"
    CALL_END = "call_end"


class RequestOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class RequestEvent:
    """
    Evenement d'observabilite emis par le RequestExecutor.

    Attributes:
        phase: Debut/fin de tentative, relance programmee ou fin d'appel logique
        backend: Backend appele
        method: Methode HTTP
        path: Chemin relatif a l'URL de base
        correlation_id: Identifiant de l'operation logique
        attempt: Numero de tentative (nombre total pour CALL_END)
        outcome: Resultat (fin de tentative et fin d'appel)
        duration_ms: Duree de la tentative ou de l'appel complet
        status_code: Statut HTTP recu, si applicable
        error_kind: Variante d'erreur, si echec
        retry_delay: Delai avant la tentative suivante (RETRY_SCHEDULED)
    """

    phase: RequestPhase
    backend: BackendKind
    method: str
    path: str
    correlation_id: str
    attempt: int = 0
    outcome: Optional[RequestOutcome] = None
    duration_ms: Optional[float] = None
    status_code: Optional[int] = None
    error_kind: Optional[ErrorKind] = None
    retry_delay: Optional[float] = None


RequestObserver = Callable[[RequestEvent], None]


def log_request_event(event: RequestEvent) -> None:
    """Observateur par defaut : ecrit les evenements dans loguru."""
    context = {
        "backend": event.backend.value,
        "method": event.method,
        "path": event.path,
        "correlation_id": event.correlation_id,
        "attempt": event.attempt,
    }
    if event.phase is RequestPhase.ATTEMPT_START:
        return
    if event.phase is RequestPhase.ATTEMPT_END:
        if event.outcome is RequestOutcome.SUCCESS:
            logger.debug(
                "Requete {method} {path} reussie",
                **context,
                status_code=event.status_code,
                duration_ms=event.duration_ms,
            )
        else:
            logger.warning(
                "Tentative {attempt} en echec: {method} {path}",
                **context,
                error_kind=event.error_kind.value if event.error_kind else None,
                status_code=event.status_code,
                duration_ms=event.duration_ms,
            )
    elif event.phase is RequestPhase.RETRY_SCHEDULED:
        logger.info(
            "Nouvelle tentative dans {retry_delay:.1f}s",
            retry_delay=event.retry_delay,
            **context,
        )
    elif event.outcome is RequestOutcome.SUCCESS:
        logger.debug(
            "Appel {method} {path} termine", duration_ms=event.duration_ms, **context
        )
    else:
        logger.error(
            "Appel {method} {path} en echec apres {attempt} tentative(s)",
            **context,
            error_kind=event.error_kind.value if event.error_kind else None,
            duration_ms=event.duration_ms,
        )


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


class RequestExecutor:
    """
    Pipeline de requetes d'un client backend.

    Sur de pour un usage concurrent : le seul etat partage entre appels est
    le pool de connexions httpx (et le circuit breaker du client).

    Args:
        config: Configuration immuable du client
        auth: Strategie d'authentification du backend
        observer: Recepteur des RequestEvent (defaut: log_request_event)
        clock: Horloge utilisee pour les attentes entre tentatives
        circuit_breaker: Circuit breaker du client (defaut: construit depuis config)
        transport: Transport httpx optionnel (tests)
        random_fn: Source du jitter
    """

    def __init__(
        self,
        config: ClientConfig,
        auth: AuthStrategy,
        *,
        observer: Optional[RequestObserver] = None,
        clock: Optional[Clock] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        random_fn: Callable[[], float] = random.random,
    ) -> None:
        self._config = config
        self._auth = auth
        self._observer = observer or log_request_event
        self._clock = clock or SystemClock()
        self._transport = transport
        self._random = random_fn
        self._policy = config.retry_policy()
        if circuit_breaker is None and config.circuit_failure_threshold > 0:
            circuit_breaker = CircuitBreaker(
                failure_threshold=config.circuit_failure_threshold,
                reset_timeout=config.circuit_reset_timeout,
                clock=self._clock,
                name=config.backend.value,
            )
        self._breaker = circuit_breaker
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def circuit_breaker(self) -> Optional[CircuitBreaker]:
        return self._breaker

    async def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, cree s'il n'existe pas.

        Utilise un client unique pour beneficier du connection pooling.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=httpx.Timeout(
                    self._config.timeout, connect=self._config.connect_timeout
                ),
                limits=self._config.pool.to_limits(),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Ferme le client HTTP et libere les connexions."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        ctx: Optional[OperationContext] = None,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        max_attempts: Optional[int] = None,
    ) -> Any:
        """
        Execute un appel logique avec relances.

        Args:
            method: GET, POST, PUT ou DELETE
            path: Chemin relatif a l'URL de base (ex: "/api/v3/series")
            params: Parametres de requete (fusionnes avec ceux de l'authentification)
            json_body: Corps JSON (POST/PUT)
            ctx: Contexte de l'operation (correlation, echeance)
            resource_type: Type de ressource rapporte en cas de 404
            resource_id: Identifiant rapporte en cas de 404
            max_attempts: Limite de tentatives pour cet appel (defaut: config)

        Returns:
            Corps JSON decode, texte brut si non JSON, ou None si vide

        Raises:
            ApiError: Erreur terminale apres epuisement ou refus des relances
            DeadlineExceededError: Echeance de l'operation depassee
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        ctx = ctx or OperationContext()
        policy = self._policy
        if max_attempts is not None:
            policy = replace(policy, max_attempts=max(1, max_attempts))
        deadline = ctx.deadline
        started = time.perf_counter()

        if self._breaker is not None and not self._breaker.can_execute():
            error = CircuitOpenError(
                "Circuit open: request refused",
                service=self._config.backend,
                correlation_id=ctx.correlation_id,
                status_code=503,
            )
            self._emit_call_end(method, path, ctx, 0, started, error)
            raise error

        decisions: dict[int, RetryDecision] = {}

        def should_retry(retry_state: RetryCallState) -> bool:
            outcome = retry_state.outcome
            if outcome is None or not outcome.failed:
                return False
            error = outcome.exception()
            if not isinstance(error, ApiError):
                return False
            decision = decide(retry_state.attempt_number, error, policy, self._random)
            if (
                decision.should_retry
                and deadline is not None
                and not deadline.allows(decision.delay)
            ):
                decision = RetryDecision(False, reason="deadline")
            decisions[retry_state.attempt_number] = decision
            return decision.should_retry

        def wait_for(retry_state: RetryCallState) -> float:
            return decisions[retry_state.attempt_number].delay

        def before_sleep(retry_state: RetryCallState) -> None:
            self._emit(
                RequestEvent(
                    phase=RequestPhase.RETRY_SCHEDULED,
                    backend=self._config.backend,
                    method=method,
                    path=path,
                    correlation_id=ctx.correlation_id,
                    attempt=retry_state.attempt_number,
                    retry_delay=decisions[retry_state.attempt_number].delay,
                )
            )

        attempts = 0
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(policy.max_attempts),
                retry=should_retry,
                wait=wait_for,
                before_sleep=before_sleep,
                sleep=self._clock.sleep,
                reraise=True,
            ):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    result = await self._attempt(
                        method, path, params, json_body, ctx, attempts,
                        resource_type, resource_id,
                    )
        except ApiError as error:
            self._record_outcome(error)
            self._emit_call_end(method, path, ctx, attempts, started, error)
            raise
        except DeadlineExceededError:
            self._emit_call_end(method, path, ctx, attempts, started, None, deadline_hit=True)
            raise

        self._record_outcome(None)
        self._emit_call_end(method, path, ctx, attempts, started, None)
        return result

    async def _attempt(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]],
        json_body: Any,
        ctx: OperationContext,
        attempt: int,
        resource_type: str,
        resource_id: Optional[str],
    ) -> Any:
        """Une tentative HTTP. Leve une ApiError classee en cas d'echec."""
        if ctx.deadline is not None:
            ctx.deadline.check()

        client = await self._get_client()
        headers = {
            **self._auth.headers(),
            CORRELATION_HEADER: ctx.correlation_id,
            "Accept": "application/json",
        }
        query = {**(params or {}), **self._auth.params()}
        event = RequestEvent(
            phase=RequestPhase.ATTEMPT_START,
            backend=self._config.backend,
            method=method,
            path=path,
            correlation_id=ctx.correlation_id,
            attempt=attempt,
        )
        self._emit(event)
        started = time.perf_counter()

        try:
            response = await client.request(
                method,
                path,
                params=query or None,
                json=json_body,
                headers=headers,
                timeout=self._timeout_for(ctx.deadline),
            )
        except (httpx.RequestError, asyncio.TimeoutError, OSError) as exc:
            error = classify(exc, service=self._config.backend, correlation_id=ctx.correlation_id)
            self._emit_attempt_end(event, started, RequestOutcome.FAILURE, error=error)
            raise error from exc

        if not response.is_success:
            error = classify(
                status_code=response.status_code,
                headers=response.headers,
                service=self._config.backend,
                correlation_id=ctx.correlation_id,
                resource_type=resource_type,
                resource_id=resource_id,
                details=_error_details(response),
            )
            self._emit_attempt_end(
                event, started, RequestOutcome.FAILURE, response.status_code, error
            )
            raise error

        try:
            payload = self._decode(response, ctx)
        except MalformedResponseError as error:
            self._emit_attempt_end(
                event, started, RequestOutcome.MALFORMED, response.status_code, error
            )
            raise
        except ApiError as error:
            self._emit_attempt_end(
                event, started, RequestOutcome.FAILURE, response.status_code, error
            )
            raise

        self._emit_attempt_end(event, started, RequestOutcome.SUCCESS, response.status_code)
        return payload

    def _decode(self, response: httpx.Response, ctx: OperationContext) -> Any:
        """
        Decode le corps d'une reponse 2xx.

        - corps vide ou 204 : None
        - HTML a la place de JSON : ApiValidationError (redirection de login)
        - JSON declare mais illisible : MalformedResponseError
        """
        if response.status_code == 204 or not response.content:
            return None

        content_type = response.headers.get("content-type", "").lower()
        if "text/html" in content_type:
            raise ApiValidationError(
                "HTML received where JSON was expected",
                details="Received an HTML page instead of JSON (likely an authentication redirect)",
                service=self._config.backend,
                correlation_id=ctx.correlation_id,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            if "json" in content_type:
                raise MalformedResponseError(
                    f"Malformed JSON payload: {exc}",
                    service=self._config.backend,
                    correlation_id=ctx.correlation_id,
                    status_code=response.status_code,
                ) from exc
            return response.text

    def _timeout_for(self, deadline: Optional[Deadline]) -> httpx.Timeout:
        total = self._config.timeout
        if deadline is not None:
            total = max(0.001, min(total, deadline.remaining()))
        return httpx.Timeout(total, connect=min(self._config.connect_timeout, total))

    def _record_outcome(self, error: Optional[ApiError]) -> None:
        """Met a jour le circuit breaker a la fin d'un appel logique."""
        if self._breaker is None or isinstance(error, CircuitOpenError):
            return
        if error is not None and error.is_retryable:
            self._breaker.record_failure()
        else:
            # Le backend a repondu : il est joignable
            self._breaker.record_success()

    def _emit(self, event: RequestEvent) -> None:
        self._observer(event)

    def _emit_attempt_end(
        self,
        start_event: RequestEvent,
        started: float,
        outcome: RequestOutcome,
        status_code: Optional[int] = None,
        error: Optional[ApiError] = None,
    ) -> None:
        self._emit(
            replace(
                start_event,
                phase=RequestPhase.ATTEMPT_END,
                outcome=outcome,
                duration_ms=_elapsed_ms(started),
                status_code=status_code,
                error_kind=error.kind if error is not None else None,
            )
        )

    def _emit_call_end(
        self,
        method: str,
        path: str,
        ctx: OperationContext,
        attempts: int,
        started: float,
        error: Optional[ApiError],
        deadline_hit: bool = False,
    ) -> None:
        failed = error is not None or deadline_hit
        self._emit(
            RequestEvent(
                phase=RequestPhase.CALL_END,
                backend=self._config.backend,
                method=method,
                path=path,
                correlation_id=ctx.correlation_id,
                attempt=attempts,
                outcome=RequestOutcome.FAILURE if failed else RequestOutcome.SUCCESS,
                duration_ms=_elapsed_ms(started),
                status_code=error.status_code if error is not None else None,
                error_kind=error.kind if error is not None else None,
            )
        )


def _error_details(response: httpx.Response) -> Optional[str]:
    """Extrait un resume du message d'erreur renvoye par le backend (400/422)."""
    if response.status_code not in (400, 422):
        return None
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or None
    if isinstance(body, list):
        messages = [
            item.get("errorMessage", "") for item in body if isinstance(item, dict)
        ]
        return "; ".join(m for m in messages if m) or None
    if isinstance(body, dict):
        return body.get("message") or body.get("error")
    return None
