"""
Pytest fixtures for place validation tests.
"""
from __future__ import annotations

from typing import List

import pytest

from place_history.cache import PlaceCache
from place_history.config import PlaceConfig
from place_history.country_registry import CountryRegistry
from place_history.resolver import TownResolver
from place_history.validation.model import PlaceRecord


@pytest.fixture(scope="module")
def resolver() -> TownResolver:
    """Resolver over the bundled country datasets, with a private cache."""
    registry = CountryRegistry.from_config(PlaceConfig(), cache=PlaceCache())
    return TownResolver(registry)


@pytest.fixture
def sample_records() -> List[PlaceRecord]:
    """One valid, one invalid, one unknown and one undated place."""
    return [
        PlaceRecord("Szentendre, Pest-Pilis-Solt-Kiskun, Hungary", 1900, obj_id="@I1@", type="BIRT"),
        PlaceRecord("Szentendre, Pest, Hungary", 1900, obj_id="@I2@", type="BIRT"),
        PlaceRecord("Nowhere, Hungary", 1900, obj_id="@I3@", type="DEAT"),
        PlaceRecord("Kecskemét, Bács-Kiskun, Hungary", None, obj_id="@I4@", type="MARR"),
    ]


class RecordingHooks:
    """App hooks that record progress and can ask the pipeline to stop."""

    def __init__(self, stop: bool = False) -> None:
        self.stop = stop
        self.steps = []
        self.values = {}

    def report_step(self, info: str = "", target=None, reset_counter: bool = False, plus_step: int = 0) -> None:
        self.steps.append((info, target, reset_counter, plus_step))

    def stop_requested(self) -> bool:
        return self.stop

    def update_key_value(self, key, value) -> None:
        self.values[key] = value


@pytest.fixture
def hooks() -> RecordingHooks:
    return RecordingHooks()


@pytest.fixture
def stopping_hooks() -> RecordingHooks:
    return RecordingHooks(stop=True)
