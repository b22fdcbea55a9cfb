from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import pytest

from tool_servers.config import Config, GreetingConfig, WolframConfig
from tool_servers.wolfram_alpha.client import QueryOptions


class RecordingQueryer:
    """Stands in for WolframServer; answers from a table and records every call."""

    def __init__(self, responses: Optional[Dict[str, str]] = None, error: Optional[Exception] = None):
        self.responses = responses or {}
        self.error = error
        self.calls: List[Tuple[str, Optional[QueryOptions]]] = []

    def execute_query(self, query: str, options: Optional[QueryOptions] = None) -> str:
        self.calls.append((query, options))
        if self.error is not None:
            raise self.error
        return self.responses.get(query, "No result found")


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("tests")


@pytest.fixture
def greeting_config() -> GreetingConfig:
    return GreetingConfig(default_message="Hello!")


@pytest.fixture
def wolfram_config() -> WolframConfig:
    return WolframConfig(app_id="TEST-APPID", timeout=5, default_max_chars=2000)


@pytest.fixture
def config(greeting_config: GreetingConfig, wolfram_config: WolframConfig) -> Config:
    return Config(greeting=greeting_config, wolfram=wolfram_config)


@pytest.fixture
def queryer() -> RecordingQueryer:
    return RecordingQueryer(
        responses={
            "integrate x^2": "x^3/3 + C",
            "population of Tokyo": "13.96 million people (2023 estimate)",
            "show steps solve x^2 = 4": "x = -2 or x = 2",
        },
    )
