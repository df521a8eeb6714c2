"""Wait for a caller-supplied condition to become true, then react.

Every operation here validates its arguments immediately and returns a coroutine. An init
action, when given, runs right away as part of the call; the condition is not polled until
the returned coroutine is awaited (or wrapped in a task). The wait runs as:

    init (at call time) -> condition, suspend, condition, suspend, ... -> terminal action

Each step finishes before the next one starts. Exceptions from any callback propagate
unchanged (a failing init to the caller, anything later to whoever awaits the wait), and no
later callback runs. There is no built-in timeout: wrap the coroutine in
asyncio.wait_for / asyncio.timeout, or make the condition itself return true on an abort
flag, to bound it.
"""

from collections.abc import Callable
from collections.abc import Coroutine
from typing import Any

from loguru import logger
from pydantic import Field

from imbue.condition_waiter.data_types import PollingSchedule
from imbue.condition_waiter.errors import InvalidCallbackError
from imbue.condition_waiter.logging import log_span
from imbue.condition_waiter.models import FrozenModel
from imbue.condition_waiter.primitives import WaitState
from imbue.condition_waiter.scheduler import AsyncioPollScheduler
from imbue.condition_waiter.scheduler import PollSchedulerInterface

Condition = Callable[[], bool]
Action = Callable[[], object]


def _require_callable(role: str, value: object) -> None:
    if value is None or not callable(value):
        raise InvalidCallbackError(f"{role} must be a zero-argument callable, got {value!r}")


def _describe_callable(func: Callable[..., object]) -> str:
    return getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or repr(func)


def _enter_state(state: WaitState) -> None:
    logger.trace("Wait entered {} state", state)


class ConditionWaiter(FrozenModel):
    """Polls a condition according to a PollingSchedule and runs a terminal action once it holds.

    A waiter keeps no per-invocation state, so one instance can serve any number of waits,
    including concurrent ones on the same event loop.
    """

    schedule: PollingSchedule = Field(
        default_factory=PollingSchedule.tight,
        description="How to suspend between evaluations of the condition",
    )
    scheduler: PollSchedulerInterface = Field(
        default_factory=AsyncioPollScheduler,
        description="Performs the suspensions the schedule asks for",
    )

    def wait(
        self,
        terminal_action: Action,
        condition: Condition,
    ) -> Coroutine[Any, Any, None]:
        """Validate the callbacks now and return a coroutine that performs the wait when awaited.

        Raises InvalidCallbackError right away if a callback is not callable, so a bad argument
        can never leave a wait silently stuck.
        """
        _require_callable("condition", condition)
        _require_callable("terminal action", terminal_action)
        return self._poll(terminal_action, condition)

    def wait_with_init(
        self,
        init_action: Action,
        terminal_action: Action,
        condition: Condition,
    ) -> Coroutine[Any, Any, None]:
        """Validate the callbacks, run init_action synchronously, then return the polling coroutine.

        If init_action raises, the exception reaches the caller here and no coroutine is created,
        so the condition and the terminal action never run.
        """
        _require_callable("init", init_action)
        _require_callable("condition", condition)
        _require_callable("terminal action", terminal_action)
        _enter_state(WaitState.INIT)
        init_action()
        return self._poll(terminal_action, condition)

    async def _poll(self, terminal_action: Action, condition: Condition) -> None:
        with log_span(
            "Waiting for condition {}",
            _describe_callable(condition),
            policy=str(self.schedule.policy),
            polling_delay_ms=int(self.schedule.polling_delay_ms),
        ):
            _enter_state(WaitState.POLLING)
            evaluation_count = 1
            while not condition():
                await self.scheduler.suspend(self.schedule)
                evaluation_count += 1
            logger.trace("Condition held on evaluation {}", evaluation_count)

            terminal_action()
            _enter_state(WaitState.DONE)


def wait_for_condition(react: Action, condition: Condition) -> Coroutine[Any, Any, None]:
    """Evaluate condition once per event loop iteration and call react as soon as it returns true.

    If the condition is expensive (it talks to a backend, say), prefer
    wait_for_condition_with_polling_delay so it is not re-evaluated on every iteration.
    """
    return ConditionWaiter(schedule=PollingSchedule.tight()).wait(react, condition)


def wait_for_condition_with_polling_delay(
    react: Action,
    condition: Condition,
    polling_delay_ms: int,
) -> Coroutine[Any, Any, None]:
    """Evaluate condition every polling_delay_ms milliseconds and call react as soon as it returns true."""
    return ConditionWaiter(schedule=PollingSchedule.delayed(polling_delay_ms)).wait(react, condition)


def wait_for_condition_with_init(
    init: Action,
    exit_action: Action,
    condition: Condition,
) -> Coroutine[Any, Any, None]:
    """Call init now, then evaluate condition once per event loop iteration and call exit_action once it holds.

    init runs before this function returns; a failing init raises here and nothing is polled.
    """
    return ConditionWaiter(schedule=PollingSchedule.tight()).wait_with_init(init, exit_action, condition)


def wait_for_condition_with_init_and_polling_delay(
    init: Action,
    exit_action: Action,
    condition: Condition,
    polling_delay_ms: int,
) -> Coroutine[Any, Any, None]:
    """Call init now, then poll condition with a delay and call exit_action once it holds.

    Every false evaluation is followed by a sleep of polling_delay_ms and then one extra event
    loop iteration, so the next evaluation always runs on a fresh iteration after the timer
    fired. Callers may rely on that extra iteration.
    """
    schedule = PollingSchedule.delayed_then_yield(polling_delay_ms)
    return ConditionWaiter(schedule=schedule).wait_with_init(init, exit_action, condition)
