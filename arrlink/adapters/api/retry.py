"""
Politique de relance avec backoff exponentiel.

La decision de relance est une fonction pure : a partir du numero de
tentative, de l'erreur classee et de la politique, elle indique s'il faut
relancer et apres quel delai. Aucun log ici : le RequestExecutor transmet
les decisions a son observateur.

Usage:
    policy = RetryPolicy(max_attempts=3, base_delay=1.0, backoff_factor=2.0)
    decision = decide(attempt=1, error=error, policy=policy)
    if decision.should_retry:
        await clock.sleep(decision.delay)
"""

import random
from dataclasses import dataclass
from typing import Callable, Optional

from arrlink.core.errors import ApiError, ErrorKind, RateLimitError


@dataclass(frozen=True)
class RetryPolicy:
    """
    Parametres de relance d'un client.

    Attributes:
        max_attempts: Nombre total de tentatives (premiere incluse)
        base_delay: Delai de base quand l'erreur n'en fournit pas (secondes)
        backoff_factor: Facteur multiplicatif entre deux tentatives
        max_delay: Plafond du delai calcule (secondes)
        jitter: Part aleatoire ajoutee au delai (0.1 = jusqu'a +10%)
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 60.0
    jitter: float = 0.1


@dataclass(frozen=True)
class RetryDecision:
    should_retry: bool
    delay: float = 0.0
    reason: str = ""


def compute_backoff(
    attempt: int,
    error_delay: Optional[float],
    policy: RetryPolicy,
    random_fn: Callable[[], float] = random.random,
) -> float:
    """
    Delai exponentiel plafonne, avec jitter.

    Le delai par defaut de l'erreur sert de base (a defaut base_delay), puis
    est multiplie par backoff_factor a chaque tentative supplementaire.
    """
    base = error_delay if error_delay is not None else policy.base_delay
    delay = min(policy.max_delay, base * policy.backoff_factor ** max(0, attempt - 1))
    if policy.jitter > 0:
        delay = min(policy.max_delay, delay * (1 + policy.jitter * random_fn()))
    return delay


def decide(
    attempt: int,
    error: ApiError,
    policy: RetryPolicy,
    random_fn: Callable[[], float] = random.random,
) -> RetryDecision:
    """
    Decide si la tentative `attempt` (a partir de 1) qui vient d'echouer
    doit etre relancee.

    Args:
        attempt: Numero de la tentative echouee
        error: Erreur classee
        policy: Politique du client
        random_fn: Source du jitter (injectable pour les tests)

    Returns:
        RetryDecision avec le delai a attendre avant la tentative suivante
    """
    if attempt >= policy.max_attempts:
        return RetryDecision(False, reason="attempts exhausted")
    if not error.is_retryable:
        return RetryDecision(False, reason=f"{error.kind.value} is not retryable")
    if error.kind is ErrorKind.NOT_FOUND and attempt > 1:
        return RetryDecision(False, reason="not found after one retry")
    if isinstance(error, RateLimitError) and error.retry_after is not None:
        return RetryDecision(True, delay=error.retry_after, reason="retry-after")
    return RetryDecision(
        True,
        delay=compute_backoff(attempt, error.retry_delay, policy, random_fn),
        reason="backoff",
    )
