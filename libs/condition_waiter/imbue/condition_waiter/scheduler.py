"""Suspension strategies used between two evaluations of a waiter's condition."""

import asyncio
from abc import ABC
from abc import abstractmethod
from typing import assert_never

from imbue.condition_waiter.data_types import PollingSchedule
from imbue.condition_waiter.models import MutableModel
from imbue.condition_waiter.primitives import SuspensionPolicy


class PollSchedulerInterface(MutableModel, ABC):
    """Interface for the cooperative scheduler a waiter suspends on.

    Implementations must never block the thread: both primitives hand control back to
    the event loop and resume the waiting coroutine later.
    """

    @abstractmethod
    async def yield_tick(self) -> None:
        """Give up control for exactly one event loop iteration."""
        ...

    @abstractmethod
    async def delay(self, seconds: float) -> None:
        """Suspend for at least the given number of seconds."""
        ...

    async def suspend(self, schedule: PollingSchedule) -> None:
        """Perform the suspension a schedule prescribes after a false evaluation."""
        match schedule.policy:
            case SuspensionPolicy.YIELD:
                await self.yield_tick()
            case SuspensionPolicy.DELAY:
                await self.delay(schedule.polling_delay_seconds)
            case SuspensionPolicy.DELAY_THEN_YIELD:
                await self.delay(schedule.polling_delay_seconds)
                await self.yield_tick()
            case _ as unreachable:
                assert_never(unreachable)


class AsyncioPollScheduler(PollSchedulerInterface):
    """Suspends on the running asyncio event loop."""

    async def yield_tick(self) -> None:
        # sleep(0) is special-cased by asyncio to a single bare yield
        await asyncio.sleep(0)

    async def delay(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
