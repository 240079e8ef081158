"""abstract-logic — Exception hierarchy.

All exceptions raised by the framework inherit from AbstractLogicError so
that callers can catch the full family with a single except clause when
needed.

Hierarchy:
    AbstractLogicError
    ├── LogicFailure
    ├── ActionError
    │   ├── ActionDefinitionError
    │   ├── ActionNotFoundError
    │   ├── MissingArgumentsError
    │   └── ArgumentVerificationError
    └── ManagerError
        ├── LogicNameRequiredError
        ├── LogicNotRegisteredError
        ├── LogicLoadError
        └── ManagerUnavailableError

``LogicFailure`` is the domain failure raised by logic code through
``BaseLogic.error``.  It is the only class ``Result.capture`` turns into a
failed Result; everything else is a defect and propagates to the caller.
"""

from __future__ import annotations

from typing import Any, Iterable

DEFAULT_FAILURE_KEY = "misc"


class AbstractLogicError(Exception):
    """Base exception for all abstract-logic errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context})"


# ---------------------------------------------------------------------------
# Domain failures
# ---------------------------------------------------------------------------


class LogicFailure(AbstractLogicError):
    """An expected business error raised deliberately by logic code."""

    def __init__(self, key: str | None, message: str) -> None:
        key = key or DEFAULT_FAILURE_KEY
        super().__init__(message, context={"key": key})
        self.key = key


# ---------------------------------------------------------------------------
# Action layer
# ---------------------------------------------------------------------------


class ActionError(AbstractLogicError):
    """Base for all action declaration and invocation errors."""


class ActionDefinitionError(ActionError):
    """An action was declared without a usable name, handler or verifier."""


class ActionNotFoundError(ActionError):
    """The logic class does not expose the requested action."""

    def __init__(self, logic: str, action: str) -> None:
        super().__init__(
            f"Logic '{logic}' does not expose action '{action}'",
            context={"logic": logic, "action": action},
        )
        self.logic = logic
        self.action = action


class MissingArgumentsError(ActionError):
    """One or more required arguments were not passed to an action."""

    def __init__(self, action: str, missing: Iterable[str]) -> None:
        missing = list(missing)
        super().__init__(
            f"Missing {', '.join(missing)} argument(s) for {action} Logic Action.",
            context={"action": action, "missing": missing},
        )
        self.action = action
        self.missing = missing


class ArgumentVerificationError(ActionError):
    """An argument value was rejected by its verifier."""

    def __init__(self, action: str, field: str) -> None:
        super().__init__(
            f"Argument '{field}' did not pass verification.",
            context={"action": action, "field": field},
        )
        self.action = action
        self.field = field


# ---------------------------------------------------------------------------
# Manager layer
# ---------------------------------------------------------------------------


class ManagerError(AbstractLogicError):
    """Base for all logic manager errors."""


class LogicNameRequiredError(ManagerError):
    """A lookup was attempted without a logic name."""

    def __init__(self) -> None:
        super().__init__("No logic name supplied")


class LogicNotRegisteredError(ManagerError):
    """No logic module is registered under the given name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"No logic module with name '{name}' registered",
            context={"name": name},
        )
        self.name = name


class LogicLoadError(ManagerError):
    """A logic class could not be imported or instantiated."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(
            f"Logic module '{name}' failed to load: {reason}",
            context={"name": name, "reason": reason},
        )
        self.name = name
        self.reason = reason


class ManagerUnavailableError(ManagerError):
    """A sibling lookup was attempted on a logic instance with no live manager."""

    def __init__(self, logic: str) -> None:
        super().__init__(
            f"Logic '{logic}' is not attached to a manager",
            context={"logic": logic},
        )
        self.logic = logic
