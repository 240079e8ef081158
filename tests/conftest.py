"""Shared pytest fixtures for the abstract-logic test suite."""

from __future__ import annotations

from typing import Any, Iterator

import pytest
import structlog

from abstract_logic.config import Settings, override_settings
from abstract_logic.manager import LogicManager
from sample_logic import ForeignLogic, SampleLogic


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def route_structlog_to_stdlib() -> Iterator[None]:
    """Send structlog events through stdlib logging so pytest captures them."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    settings = Settings(
        logging={"level": "debug", "format": "console"},
        modules={"Foo": "sample_logic:ForeignLogic"},
        logic={"Test": {"foo": 23}},
    )
    override_settings(settings)
    return settings


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------


@pytest.fixture
def logic_config() -> dict[str, Any]:
    return {"Test": {"foo": 23}}


@pytest.fixture
def manager(logic_config: dict[str, Any]) -> LogicManager:
    manager = LogicManager(config=logic_config)
    manager.load("Test", SampleLogic)
    manager.load("Foo", ForeignLogic)
    return manager


@pytest.fixture
def test_logic(manager: LogicManager) -> SampleLogic:
    return manager.lookup("Test")  # type: ignore[return-value]
