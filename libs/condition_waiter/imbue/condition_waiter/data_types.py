from typing import Self

from pydantic import Field
from pydantic import model_validator

from imbue.condition_waiter.errors import InvalidPollingScheduleError
from imbue.condition_waiter.models import FrozenModel
from imbue.condition_waiter.primitives import PollingDelayMs
from imbue.condition_waiter.primitives import SuspensionPolicy


class PollingSchedule(FrozenModel):
    """Describes how a waiter suspends between evaluations of its condition.

    A YIELD schedule re-checks on the next event loop iteration and carries no delay.
    DELAY and DELAY_THEN_YIELD schedules sleep for polling_delay_ms before re-checking;
    DELAY_THEN_YIELD additionally yields one event loop iteration after the sleep so that
    the check happens on a fresh iteration rather than inside the timer callback's turn.
    """

    policy: SuspensionPolicy = Field(description="Suspension performed after each false evaluation")
    polling_delay_ms: PollingDelayMs = Field(
        default=PollingDelayMs(0),
        description="Minimum time between two evaluations, in milliseconds",
    )

    @model_validator(mode="after")
    def _check_delay_matches_policy(self) -> Self:
        if self.policy == SuspensionPolicy.YIELD and self.polling_delay_ms != 0:
            raise InvalidPollingScheduleError(
                f"A {self.policy} schedule cannot carry a polling delay (got {self.polling_delay_ms} ms)"
            )
        return self

    @classmethod
    def tight(cls) -> "PollingSchedule":
        return cls(policy=SuspensionPolicy.YIELD)

    @classmethod
    def delayed(cls, polling_delay_ms: int) -> "PollingSchedule":
        return cls(policy=SuspensionPolicy.DELAY, polling_delay_ms=PollingDelayMs(polling_delay_ms))

    @classmethod
    def delayed_then_yield(cls, polling_delay_ms: int) -> "PollingSchedule":
        return cls(policy=SuspensionPolicy.DELAY_THEN_YIELD, polling_delay_ms=PollingDelayMs(polling_delay_ms))

    @property
    def polling_delay_seconds(self) -> float:
        return self.polling_delay_ms.seconds
