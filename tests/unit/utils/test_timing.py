"""
Tests unitaires pour l'horloge, les echeances et la re-verification differee.
"""

import pytest

from arrlink.core.errors import DeadlineExceededError
from arrlink.utils.timing import Deadline, RecheckScheduler, wait


class TestDeadline:
    def test_remaining_decreases_with_clock(self, fake_clock) -> None:
        deadline = Deadline(fake_clock, timeout=10)
        fake_clock.advance(4)
        assert deadline.remaining() == 6
        assert not deadline.expired

    def test_check_raises_when_expired(self, fake_clock) -> None:
        deadline = Deadline(fake_clock, timeout=5)
        fake_clock.advance(5)
        with pytest.raises(DeadlineExceededError):
            deadline.check()

    @pytest.mark.asyncio
    async def test_sleep_within_deadline(self, fake_clock) -> None:
        deadline = Deadline(fake_clock, timeout=10)
        await deadline.sleep(3)
        assert fake_clock.sleeps == [3]

    @pytest.mark.asyncio
    async def test_sleep_past_deadline_fails_fast(self, fake_clock) -> None:
        """Une attente qui depasserait l'echeance echoue sans dormir."""
        deadline = Deadline(fake_clock, timeout=10)
        with pytest.raises(DeadlineExceededError):
            await deadline.sleep(10)
        assert fake_clock.sleeps == []


class TestWait:
    @pytest.mark.asyncio
    async def test_wait_without_deadline(self, fake_clock) -> None:
        await wait(fake_clock, 2.5)
        assert fake_clock.sleeps == [2.5]

    @pytest.mark.asyncio
    async def test_wait_with_deadline(self, fake_clock) -> None:
        deadline = Deadline(fake_clock, timeout=1)
        with pytest.raises(DeadlineExceededError):
            await wait(fake_clock, 2, deadline)


class TestRecheckScheduler:
    @pytest.mark.asyncio
    async def test_recheck_waits_then_runs_check(self, fake_clock) -> None:
        scheduler = RecheckScheduler(fake_clock)
        scheduler.schedule_recheck(after=5)
        assert scheduler.is_scheduled

        async def check() -> str:
            return "done"

        assert await scheduler.recheck(check) == "done"
        assert fake_clock.sleeps == [5]
        assert not scheduler.is_scheduled

    @pytest.mark.asyncio
    async def test_elapsed_time_is_deducted(self, fake_clock) -> None:
        scheduler = RecheckScheduler(fake_clock)
        scheduler.schedule_recheck(after=5)
        fake_clock.advance(3)

        async def check() -> bool:
            return True

        await scheduler.recheck(check)
        assert fake_clock.sleeps == [2]

    @pytest.mark.asyncio
    async def test_recheck_requires_schedule(self, fake_clock) -> None:
        async def check() -> None:
            return None

        with pytest.raises(RuntimeError):
            await RecheckScheduler(fake_clock).recheck(check)

    @pytest.mark.asyncio
    async def test_recheck_bounded_by_deadline(self, fake_clock) -> None:
        scheduler = RecheckScheduler(fake_clock, Deadline(fake_clock, timeout=3))
        scheduler.schedule_recheck(after=5)

        async def check() -> bool:
            return True

        with pytest.raises(DeadlineExceededError):
            await scheduler.recheck(check)
