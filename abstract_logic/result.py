"""Result layer — uniform outcome of an action call.

Every action invocation returns exactly one :class:`Result`.  A Result is
either successful (carrying the handler's return value) or failed (carrying
the key, message and original :class:`LogicFailure` raised by logic code).

Only ``LogicFailure`` is converted into a failed Result.  Any other
exception escaping a handler is a defect and propagates unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, NoReturn

from abstract_logic.exceptions import LogicFailure

if TYPE_CHECKING:
    from abstract_logic.action import ActionContext
    from abstract_logic.base import BaseLogic


@dataclass(frozen=True)
class Result:
    """Outcome of a logic action call.

    A failed Result is falsy but still fully inspectable::

        result = manager.lookup("Orders").place(sku="A-1", quantity=2)
        if result:
            print("placed", result.value)
        else:
            print("refused", result.key, result.error)
    """

    succeeded: bool
    value: Any = None
    key: str | None = None
    error: str | None = None
    exception: LogicFailure | None = None

    def __bool__(self) -> bool:
        return self.succeeded

    @property
    def is_ok(self) -> bool:
        return self.succeeded

    @property
    def is_failed(self) -> bool:
        return not self.succeeded

    @property
    def result(self) -> Any:
        """Alias of :attr:`value`."""
        return self.value

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(succeeded=True, value=value)

    @classmethod
    def failure(cls, exc: LogicFailure) -> "Result":
        return cls(succeeded=False, key=exc.key, error=exc.message, exception=exc)

    @classmethod
    def capture(
        cls,
        handler: Callable[["BaseLogic", "ActionContext"], Any],
        logic: "BaseLogic",
        context: "ActionContext",
    ) -> "Result":
        """Call *handler* and fold its outcome into a Result.

        A Result returned by the handler (typically forwarded from a sibling
        action) is passed through as-is, never re-wrapped.
        """
        try:
            value = handler(logic, context)
        except LogicFailure as exc:
            return cls.failure(exc)
        if isinstance(value, Result):
            return value
        return cls.success(value)

    @staticmethod
    def throw_exception(key: str | None, message: str) -> NoReturn:
        """Raise the domain failure that :meth:`capture` knows how to catch."""
        raise LogicFailure(key, message)

    # ------------------------------------------------------------------
    # Consumption
    # ------------------------------------------------------------------

    def unwrap(self) -> Any:
        """Return :attr:`value`, or re-raise the captured failure."""
        if self.exception is not None:
            raise self.exception
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "value": self.value,
            "key": self.key,
            "error": self.error,
        }
