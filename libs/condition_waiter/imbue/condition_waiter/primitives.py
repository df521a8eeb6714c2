from enum import StrEnum
from enum import auto
from typing import Any
from typing import Self

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema
from pydantic_core import core_schema

from imbue.condition_waiter.errors import InvalidPollingDelayError


class UpperCaseStrEnum(StrEnum):
    """A StrEnum whose auto() values are the upper-cased member names."""

    @staticmethod
    def _generate_next_value_(
        name: str,
        start: int,
        count: int,
        last_values: list[str],
    ) -> str:
        return name.upper()


class SuspensionPolicy(UpperCaseStrEnum):
    """How a waiter suspends between two evaluations of its condition."""

    # One bare event loop iteration.
    YIELD = auto()
    # One timed sleep of the polling delay.
    DELAY = auto()
    # A timed sleep followed by one more event loop iteration.
    DELAY_THEN_YIELD = auto()


class WaitState(UpperCaseStrEnum):
    """Lifecycle of a single wait invocation."""

    INIT = auto()
    POLLING = auto()
    DONE = auto()


class PollingDelayMs(int):
    """A polling delay in whole milliseconds. Must be >= 0."""

    def __new__(cls, value: int) -> Self:
        # bool is an int subclass but True/False are never meant as durations
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidPollingDelayError(
                f"{cls.__name__} must be an integer number of milliseconds, got {value!r}"
            )
        if value < 0:
            raise InvalidPollingDelayError(f"{cls.__name__} must be >= 0, got {value}")
        return super().__new__(cls, value)

    @property
    def seconds(self) -> float:
        return int(self) / 1000.0

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.int_schema(ge=0, strict=True),
        )
