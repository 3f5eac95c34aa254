"""Result Adapter: makes the engine polymorphic over bare values and outcomes.

The adapter is chosen once, when an operation is wrapped, never per call.
With ``BARE_VALUE`` every result is a success and all operations are
identities. With ``OUTCOME`` the operation returns ``Ok``/``Err``; only the
``Ok`` payload is cached and an ``Err`` is handed back untouched.
"""

import abc
from typing import Any

from cacheserde.domain.models.outcome import Err, Ok


class ResultAdapter(abc.ABC):
    """Abstract Base Class for interpreting an operation's outcome."""

    @abc.abstractmethod
    def is_failure(self, outcome: Any) -> bool:
        """True if the outcome is a failure that must not be cached."""
        pass

    @abc.abstractmethod
    def unwrap_success(self, outcome: Any) -> Any:
        """Extracts the cacheable payload from an outcome known not to be a failure."""
        pass

    @abc.abstractmethod
    def wrap_success(self, value: Any) -> Any:
        """Builds the value returned to the caller from a success payload."""
        pass

    @abc.abstractmethod
    def pass_failure(self, outcome: Any) -> Any:
        """Returns an already-known failure to the caller."""
        pass


class BareValueAdapter(ResultAdapter):
    """Operations returning a plain value; every result is cached."""

    def is_failure(self, outcome: Any) -> bool:
        return False

    def unwrap_success(self, outcome: Any) -> Any:
        return outcome

    def wrap_success(self, value: Any) -> Any:
        return value

    def pass_failure(self, outcome: Any) -> Any:
        return outcome


class OutcomeAdapter(ResultAdapter):
    """Operations returning ``Ok``/``Err``; only ``Ok.value`` is cached."""

    def is_failure(self, outcome: Any) -> bool:
        if isinstance(outcome, Err):
            return True
        if isinstance(outcome, Ok):
            return False
        raise TypeError(
            f"Fallible operation must return Ok or Err, got {type(outcome).__name__}"
        )

    def unwrap_success(self, outcome: Ok) -> Any:
        return outcome.value

    def wrap_success(self, value: Any) -> Ok:
        return Ok(value)

    def pass_failure(self, outcome: Err) -> Err:
        return outcome


BARE_VALUE = BareValueAdapter()
OUTCOME = OutcomeAdapter()


def select_adapter(fallible: bool) -> ResultAdapter:
    """Picks the adapter for an operation at wrapping-setup time."""
    return OUTCOME if fallible else BARE_VALUE
