"""abstract-logic — Isolated business logic behind validated actions.

Logic modules group related business operations ("actions").  A manager
owns the modules, hands each one its config fragment and resolves names to
instances.  Every action call validates its named arguments and returns a
uniform :class:`Result` instead of raising on expected business errors.

Layers (bottom to top):
    1. Result  — success/failure wrapper and the capture protocol
    2. Action  — argument validation in front of a handler
    3. Logic   — BaseLogic, the contract every logic module honours
    4. Manager — loading, config distribution and name lookup
"""

__version__ = "0.1.0"

from abstract_logic.action import Action, ActionContext, action
from abstract_logic.base import BaseLogic
from abstract_logic.exceptions import (
    AbstractLogicError,
    ActionDefinitionError,
    ActionError,
    ActionNotFoundError,
    ArgumentVerificationError,
    LogicFailure,
    LogicLoadError,
    LogicNameRequiredError,
    LogicNotRegisteredError,
    ManagerError,
    ManagerUnavailableError,
    MissingArgumentsError,
)
from abstract_logic.manager import LogicManager
from abstract_logic.result import Result

__all__ = [
    "__version__",
    "AbstractLogicError",
    "Action",
    "ActionContext",
    "ActionDefinitionError",
    "ActionError",
    "ActionNotFoundError",
    "ArgumentVerificationError",
    "BaseLogic",
    "LogicFailure",
    "LogicLoadError",
    "LogicManager",
    "LogicNameRequiredError",
    "LogicNotRegisteredError",
    "ManagerError",
    "ManagerUnavailableError",
    "MissingArgumentsError",
    "Result",
    "action",
]
