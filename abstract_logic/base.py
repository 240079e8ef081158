"""Logic layer — BaseLogic interface.

Every logic module must subclass ``BaseLogic`` and declare its operations
as actions (see :func:`abstract_logic.action.action`).

Design principles:
  - Logic modules are stateless apart from their config and manager handle.
  - Expected business errors are raised with :meth:`BaseLogic.error` and
    come back to the caller as a failed ``Result``.
  - The manager handle is a weak reference: the manager owns its modules,
    never the other way round.
"""

from __future__ import annotations

import weakref
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, NoReturn

from abstract_logic.action import Action
from abstract_logic.exceptions import (
    ActionDefinitionError,
    ActionNotFoundError,
    ManagerUnavailableError,
)
from abstract_logic.result import Result

if TYPE_CHECKING:
    from abstract_logic.manager import LogicManager


class BaseLogic:
    """Base class for all logic modules.

    Subclasses declare actions in their class body; the action table is
    resolved through the MRO, including actions inherited from parents::

        class Greeter(BaseLogic):

            @action(needs="name")
            def greet(self, ctx):
                return f"{self.config_value('greeting', 'Hello')}, {ctx['name']}!"

        Greeter(config={"greeting": "Hi"}).greet(name="Ada").value  # "Hi, Ada!"
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for attr, value in list(vars(cls).items()):
            if not isinstance(value, Action):
                continue
            cls._check_action_name(value.name)
            # Actions declared under an explicit name live under that name only.
            if value.name != attr:
                delattr(cls, attr)
                setattr(cls, value.name, value)

    @classmethod
    def _check_action_name(cls, name: str) -> None:
        """Reject action names that would replace a BaseLogic member."""
        if name in vars(BaseLogic):
            raise ActionDefinitionError(
                f"Action name '{name}' is reserved by BaseLogic",
                context={"logic": cls.__name__, "action": name},
            )

    @classmethod
    def _action_table(cls) -> dict[str, Action]:
        # Walked on each lookup: actions installed on a parent after a
        # subclass was created must still resolve through the subclass.
        table: dict[str, Action] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                if isinstance(value, Action):
                    table[attr] = value
                elif attr in table:
                    # A plain attribute in a subclass shadows the parent's action.
                    del table[attr]
        return table

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        self._config: Mapping[str, Any] = MappingProxyType(dict(config or {}))
        self._manager_ref: weakref.ReferenceType[LogicManager] | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(actions={self.action_names()!r})"

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    @property
    def config(self) -> Mapping[str, Any]:
        return self._config

    def config_value(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    # ------------------------------------------------------------------
    # Manager handle
    # ------------------------------------------------------------------

    def set_manager(self, manager: "LogicManager") -> None:
        self._manager_ref = weakref.ref(manager)

    @property
    def manager(self) -> "LogicManager":
        manager = self._manager_ref() if self._manager_ref is not None else None
        if manager is None:
            raise ManagerUnavailableError(type(self).__name__)
        return manager

    def logic(self, name: str | None = None) -> "BaseLogic":
        """Return this module without *name*, otherwise the sibling registered as *name*."""
        if not name:
            return self
        return self.manager.lookup(name)

    # ------------------------------------------------------------------
    # Domain failures
    # ------------------------------------------------------------------

    def error(self, key: str | None, message: str) -> NoReturn:
        """Abort the running action with a failure the caller receives as a Result."""
        Result.throw_exception(key, message)

    throw = error

    # ------------------------------------------------------------------
    # Action table
    # ------------------------------------------------------------------

    @classmethod
    def action_names(cls) -> list[str]:
        return sorted(cls._action_table())

    @classmethod
    def get_action(cls, name: str) -> Action:
        try:
            return cls._action_table()[name]
        except KeyError:
            raise ActionNotFoundError(logic=cls.__name__, action=name) from None

    def call(self, action_name: str, /, **args: Any) -> Result:
        """Dispatch *action_name* with *args*; equivalent to ``self.<action_name>(**args)``."""
        return self.get_action(action_name).execute(self, args)

    @classmethod
    def describe(cls) -> dict[str, Any]:
        table = cls._action_table()
        return {
            "logic": cls.__name__,
            "description": (cls.__doc__ or "").strip().split("\n")[0],
            "actions": [table[name].describe() for name in sorted(table)],
        }
