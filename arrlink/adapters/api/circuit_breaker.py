"""
Circuit breaker d'un client backend.

Evite d'epuiser les relances pendant une panne : apres un nombre d'appels
logiques consecutifs en echec, le circuit s'ouvre et les appels suivants
sont refuses sans requete reseau jusqu'a l'expiration du delai de reprise.

Etats :
- CLOSED : fonctionnement normal, les echecs sont comptes
- OPEN : tous les appels sont refuses
- HALF_OPEN : un appel de test est autorise pour verifier la reprise
"""

from enum import Enum
from typing import Optional

from loguru import logger

from arrlink.utils.timing import Clock, SystemClock


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Machine a etats du circuit breaker.

    L'etat est propre a une instance de client et n'est jamais persiste.
    Sous asyncio les transitions sont atomiques (aucun await entre lecture
    et ecriture de l'etat).

    Args:
        failure_threshold: Echecs consecutifs avant ouverture (defaut: 5)
        reset_timeout: Secondes avant passage en HALF_OPEN (defaut: 30)
        clock: Horloge monotone (injectable pour les tests)

    Usage:
        breaker = CircuitBreaker()
        if breaker.can_execute():
            try:
                result = await call()
                breaker.record_success()
            except ServiceUnavailableError:
                breaker.record_failure()
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        reset_timeout: float = 30.0,
        clock: Optional[Clock] = None,
        name: str = "",
    ) -> None:
        self._failure_threshold = failure_threshold
        self._reset_timeout = reset_timeout
        self._clock = clock or SystemClock()
        self._name = name

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at: Optional[float] = None

    @property
    def state(self) -> CircuitState:
        """Etat courant, avec passage automatique OPEN -> HALF_OPEN."""
        if self._state is CircuitState.OPEN and self._opened_at is not None:
            if self._clock.monotonic() - self._opened_at >= self._reset_timeout:
                self._state = CircuitState.HALF_OPEN
                logger.info("Circuit semi-ouvert, appel de test autorise", backend=self._name)
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def can_execute(self) -> bool:
        return self.state is not CircuitState.OPEN

    def record_success(self) -> None:
        if self._state is not CircuitState.CLOSED:
            logger.info("Circuit referme", backend=self._name)
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at = None

    def record_failure(self) -> None:
        self._failure_count += 1
        if self._state is CircuitState.HALF_OPEN:
            self._open()
        elif self._state is CircuitState.CLOSED and self._failure_count >= self._failure_threshold:
            self._open()

    def reset(self) -> None:
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at = None

    def _open(self) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = self._clock.monotonic()
        logger.warning(
            "Circuit ouvert",
            backend=self._name,
            failures=self._failure_count,
            reset_timeout=self._reset_timeout,
        )
