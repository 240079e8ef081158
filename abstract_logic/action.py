"""Action layer — validated, named operations on logic classes.

An :class:`Action` gates a handler function behind argument validation:

  1. every required field must be present in the call's arguments
  2. every argument with a verifier must satisfy it
  3. the handler then runs through :meth:`Result.capture`

Actions are descriptors.  Declared in a class body (usually through the
:func:`action` decorator) they appear on instances as ordinary methods that
take keyword arguments and return a :class:`Result`::

    class OrderLogic(BaseLogic):

        @action(needs=["sku", "quantity"], verify={"quantity": is_positive})
        def place(self, ctx):
            stock = ctx.logic("Stock").reserve(sku=ctx["sku"], amount=ctx["quantity"])
            if not stock:
                self.error("out_of_stock", stock.error)
            return {"sku": ctx["sku"], "reserved": stock.value}

Handlers receive the logic instance and an :class:`ActionContext`.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Union

from abstract_logic.exceptions import (
    ActionDefinitionError,
    ArgumentVerificationError,
    MissingArgumentsError,
)
from abstract_logic.logging import action_log_context, get_logger
from abstract_logic.result import Result

if TYPE_CHECKING:
    from abstract_logic.base import BaseLogic

log = get_logger(__name__)

Verifier = Callable[[Any], Any]
Handler = Callable[["BaseLogic", "ActionContext"], Any]


class ActionContext(Mapping[str, Any]):
    """Call context handed to an action handler.

    Behaves as a read-only mapping of the call's named arguments
    (``ctx["foo"]``, ``ctx.get("foo")``, ``**ctx``) and carries the resolver
    for sibling logic modules.
    """

    def __init__(self, instance: "BaseLogic", args: Mapping[str, Any]) -> None:
        self._instance = instance
        self._args = MappingProxyType(dict(args))

    def __getitem__(self, key: str) -> Any:
        return self._args[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._args)

    def __len__(self) -> int:
        return len(self._args)

    def __repr__(self) -> str:
        return f"ActionContext({type(self._instance).__name__}, {dict(self._args)!r})"

    @property
    def args(self) -> Mapping[str, Any]:
        return self._args

    @property
    def instance(self) -> "BaseLogic":
        return self._instance

    def logic(self, name: str | None = None) -> "BaseLogic":
        """Resolve a logic module: the owning one without *name*, a sibling with it."""
        return self._instance.logic(name)


def _normalize_needs(needs: Union[str, Iterable[str], None]) -> tuple[str, ...]:
    if needs is None:
        return ()
    if isinstance(needs, str):
        return (needs,)
    # dict.fromkeys drops duplicates but keeps declaration order.
    return tuple(dict.fromkeys(needs))


class Action:
    """A named, validated operation installable on a logic class.

    Immutable once constructed.  ``needs`` is a single field name or an
    iterable of them; ``verify`` maps field names to predicates that are only
    consulted for fields actually passed in a call.
    """

    __slots__ = ("_name", "_handler", "_needs", "_verify", "_description")

    def __init__(
        self,
        name: str,
        handler: Handler,
        needs: Union[str, Iterable[str], None] = (),
        verify: Mapping[str, Verifier] | None = None,
        description: str = "",
    ) -> None:
        if not name:
            raise ActionDefinitionError("Logic Action has no name")
        if not callable(handler):
            raise ActionDefinitionError(
                f"Logic Action '{name}' has no code argument",
                context={"action": name},
            )
        verify = dict(verify or {})
        for field, verifier in verify.items():
            if not callable(verifier):
                raise ActionDefinitionError(
                    f"Logic Action '{name}' has a non-callable verifier for '{field}'",
                    context={"action": name, "field": field},
                )

        self._name = name
        self._handler = handler
        self._needs = _normalize_needs(needs)
        self._verify: Mapping[str, Verifier] = MappingProxyType(verify)
        self._description = description

    def __repr__(self) -> str:
        return f"Action({self._name!r}, needs={list(self._needs)!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def handler(self) -> Handler:
        return self._handler

    @property
    def needs(self) -> tuple[str, ...]:
        return self._needs

    @property
    def verifiers(self) -> Mapping[str, Verifier]:
        return self._verify

    @property
    def description(self) -> str:
        return self._description

    # ------------------------------------------------------------------
    # Descriptor protocol — instance access yields a bound callable
    # ------------------------------------------------------------------

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self

        def bound(**args: Any) -> Result:
            return self.execute(instance, args)

        # Keyword-only call form; the handler's (logic, ctx) signature is
        # not exposed.
        bound.__name__ = self._name
        bound.__qualname__ = f"{type(instance).__name__}.{self._name}"
        bound.__doc__ = self._description or self._handler.__doc__
        return bound

    def install(self, target: type, name: str | None = None) -> None:
        """Expose this action as *name* on *target* (defaults to the action name)."""
        name = name or self._name
        check = getattr(target, "_check_action_name", None)
        if check is not None:
            check(name)
        setattr(target, name, self)

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def verify_arguments(self, args: Mapping[str, Any]) -> None:
        """Raise if a required field is absent or a verifier rejects a value."""
        missing = [field for field in self._needs if field not in args]
        if missing:
            raise MissingArgumentsError(self._name, missing)

        for field, value in args.items():
            verifier = self._verify.get(field)
            if verifier is not None and not verifier(value):
                raise ArgumentVerificationError(self._name, field)

    def execute(self, logic: "BaseLogic", args: Mapping[str, Any] | None = None) -> Result:
        """Verify *args*, run the handler for *logic*, and return its Result.

        Raises:
            MissingArgumentsError:     A required field was not passed.
            ArgumentVerificationError: A verifier rejected a passed value.
        """
        args = dict(args or {})
        with action_log_context(type(logic).__name__, self._name):
            self.verify_arguments(args)
            log.debug("action_started", args=sorted(args))
            result = Result.capture(self._handler, logic, ActionContext(logic, args))
            if result:
                log.debug("action_succeeded")
            else:
                log.debug("action_failed", key=result.key, error=result.error)
        return result

    def describe(self) -> dict[str, Any]:
        return {
            "name": self._name,
            "needs": list(self._needs),
            "verified": sorted(self._verify),
            "description": self._description,
        }


def action(
    name: Union[str, Handler, None] = None,
    *,
    needs: Union[str, Iterable[str], None] = (),
    verify: Mapping[str, Verifier] | None = None,
    description: str | None = None,
) -> Any:
    """Declare a logic action from a function in a class body.

    Usable bare (``@action``) or with options (``@action("add", needs=["a", "b"])``).
    The action name defaults to the function name and the description to
    its docstring.
    """

    if callable(name):
        return action(needs=needs, verify=verify, description=description)(name)

    def decorator(fn: Handler) -> Action:
        return Action(
            name=name or fn.__name__,
            handler=fn,
            needs=needs,
            verify=verify,
            description=description if description is not None else inspect.getdoc(fn) or "",
        )

    return decorator
