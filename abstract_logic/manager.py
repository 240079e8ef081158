"""Manager layer — logic module registry.

The manager is the single owner of all loaded logic modules.  It handles:
  - Importing logic classes given as dotted paths
  - Instantiating each class with its config fragment
  - Resolving names to instances, wiring itself into every instance it
    hands out so actions can reach sibling modules

Re-loading a name replaces the previous instance (last write wins).
"""

from __future__ import annotations

import importlib
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Type, Union

from abstract_logic.base import BaseLogic
from abstract_logic.exceptions import (
    LogicLoadError,
    LogicNameRequiredError,
    LogicNotRegisteredError,
)
from abstract_logic.logging import get_logger

if TYPE_CHECKING:
    from abstract_logic.config import Settings

log = get_logger(__name__)


def import_logic_class(path: str) -> Type[BaseLogic]:
    """Import a logic class from ``"pkg.module:Class"`` or ``"pkg.module.Class"``."""
    if ":" in path:
        module_path, _, attr = path.partition(":")
    else:
        module_path, _, attr = path.rpartition(".")
    if not module_path or not attr:
        raise ImportError(f"'{path}' is not a dotted class path")

    module = importlib.import_module(module_path)
    try:
        logic_class = getattr(module, attr)
    except AttributeError:
        raise ImportError(f"module '{module_path}' has no attribute '{attr}'") from None
    if not (isinstance(logic_class, type) and issubclass(logic_class, BaseLogic)):
        raise ImportError(f"'{path}' is not a BaseLogic subclass")
    return logic_class


class LogicManager:
    """Runtime registry of logic modules.

    Usage::

        manager = LogicManager(config={"Orders": {"max_quantity": 10}})
        manager.load("Orders", OrderLogic)
        manager.load("Stock", "shop.logic.stock:StockLogic")

        result = manager.lookup("Orders").place(sku="A-1", quantity=2)
    """

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        self._config: dict[str, Any] = dict(config or {})
        self._logics: dict[str, BaseLogic] = {}

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LogicManager":
        """Build a manager from settings and load every configured module."""
        manager = cls(config=settings.logic)
        for name, path in settings.modules.items():
            manager.load(name, path)
        return manager

    def __contains__(self, name: object) -> bool:
        return name in self._logics

    def __len__(self) -> int:
        return len(self._logics)

    def names(self) -> list[str]:
        return sorted(self._logics)

    def load(self, name: str, logic_class: Union[Type[BaseLogic], str]) -> BaseLogic:
        """Instantiate *logic_class* with the config under *name* and register it.

        Raises:
            LogicLoadError: The class could not be imported or its constructor failed.
        """
        if isinstance(logic_class, str):
            try:
                logic_class = import_logic_class(logic_class)
            except ImportError as exc:
                log.error("logic_load_failed", name=name, reason=str(exc))
                raise LogicLoadError(name=name, reason=str(exc)) from exc

        fragment = self._config.get(name) or {}
        try:
            instance = logic_class(config=fragment)
        except Exception as exc:
            log.error("logic_load_failed", name=name, reason=str(exc))
            raise LogicLoadError(name=name, reason=str(exc)) from exc

        if name in self._logics:
            log.warning(
                "logic_reloaded",
                name=name,
                previous=type(self._logics[name]).__name__,
                logic_class=logic_class.__name__,
            )
        self._logics[name] = instance
        log.info("logic_loaded", name=name, logic_class=logic_class.__name__)
        return instance

    def lookup(self, name: str | None) -> BaseLogic:
        """Return the logic module registered as *name*, attached to this manager.

        Raises:
            LogicNameRequiredError:  *name* is empty or None.
            LogicNotRegisteredError: Nothing is registered under *name*.
        """
        if not name:
            raise LogicNameRequiredError()
        try:
            logic = self._logics[name]
        except KeyError:
            raise LogicNotRegisteredError(name) from None
        logic.set_manager(self)
        return logic

    def unload(self, name: str) -> None:
        if self._logics.pop(name, None) is not None:
            log.info("logic_unloaded", name=name)

    def describe(self) -> dict[str, dict[str, Any]]:
        """Return name → action description for every loaded module."""
        return {name: type(self._logics[name]).describe() for name in self.names()}
