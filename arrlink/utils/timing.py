"""
Horloge, echeances et re-verification differee.

Toutes les attentes de l'orchestrateur passent par une Clock injectable :
en production SystemClock s'appuie sur asyncio.sleep, en test une fausse
horloge rend chaque attente instantanee et observable.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, TypeVar

from arrlink.core.errors import DeadlineExceededError

T = TypeVar("T")


class Clock(ABC):
    @abstractmethod
    def monotonic(self) -> float:
        ...

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        ...


class SystemClock(Clock):
    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class Deadline:
    """
    Echeance globale d'une operation.

    Une attente qui ne peut pas se terminer avant l'echeance leve
    DeadlineExceededError immediatement au lieu de dormir pour rien.

    Example:
        deadline = Deadline(SystemClock(), timeout=300)
        await deadline.sleep(5)
        deadline.check()
    """

    def __init__(self, clock: Clock, timeout: float) -> None:
        self._clock = clock
        self.timeout = timeout
        self._expires_at = clock.monotonic() + timeout

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def allows(self, seconds: float) -> bool:
        """True si une attente de `seconds` se termine avant l'echeance."""
        return seconds < self.remaining()

    def check(self) -> None:
        if self.expired:
            raise DeadlineExceededError(self.timeout)

    async def sleep(self, seconds: float) -> None:
        if not self.allows(seconds):
            raise DeadlineExceededError(self.timeout)
        await self._clock.sleep(seconds)


async def wait(clock: Clock, seconds: float, deadline: Optional[Deadline] = None) -> None:
    """Attend `seconds`, en respectant l'echeance si elle est fournie."""
    if deadline is not None:
        await deadline.sleep(seconds)
    else:
        await clock.sleep(seconds)


class RecheckScheduler:
    """
    Re-verification en deux temps : planification puis execution.

    schedule_recheck(after) fixe le moment de la verification, recheck(check)
    attend ce moment puis execute la verification.

    Example:
        scheduler = RecheckScheduler(clock, deadline)
        scheduler.schedule_recheck(after=5.0)
        remaining = await scheduler.recheck(lambda: count_monitored(series_id))
    """

    def __init__(self, clock: Clock, deadline: Optional[Deadline] = None) -> None:
        self._clock = clock
        self._deadline = deadline
        self._due_at: Optional[float] = None

    @property
    def is_scheduled(self) -> bool:
        return self._due_at is not None

    def schedule_recheck(self, after: float) -> None:
        self._due_at = self._clock.monotonic() + max(0.0, after)

    async def recheck(self, check: Callable[[], Awaitable[T]]) -> T:
        if self._due_at is None:
            raise RuntimeError("recheck() called before schedule_recheck()")
        delay = self._due_at - self._clock.monotonic()
        self._due_at = None
        if delay > 0:
            await wait(self._clock, delay, self._deadline)
        if self._deadline is not None:
            self._deadline.check()
        return await check()
