"""
Shared pytest fixtures for quarry tests.

This module provides:
- The cast list used by the fetch integration tests
- An in-memory SQLite connection, opened and closed per test
- A recording executor that captures compiled statements without a database
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from quarry.core.adapters.sqlite import SQLiteConnection
from quarry.core.fetch import FetchRequest, FetchRequestSQLWriter


ACTORS = [
    {"name": "Mark", "surname": "Hamill", "role": "Luke Skywalker"},
    {"name": "Carrie", "surname": "Fischer", "role": "Leia Organa"},
    {"name": "Kenny", "surname": "Baker", "role": "R2-D2"},
    {"name": "Anthony", "surname": "Daniels", "role": "C3PO"},
    {"name": "Peter", "surname": "Mayhew", "role": "Chewbacca"},
    {"name": "Harrison", "surname": "Ford", "role": "Han Solo"},
    {"name": "Alec", "surname": "Guinness", "role": "Obi-wan Kenobi"},
    {"name": "Hayden", "surname": "Christensen", "role": "Anakin Skywalker"},
    {"name": "Ewan", "surname": "McGregor", "role": "Obi-wan Kenobi"},
    {"name": "Daisy", "surname": "Ridley", "role": "Rey"},
    {"name": "John", "surname": "Boyega", "role": "Finn"},
    {"name": "Adam", "surname": "Driver", "role": "Kylo Ren"},
    {"name": "Andy", "surname": "Serkis", "role": "Snoke"},
]


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = item.path.relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


class RecordingExecutor:
    """FetchExecutor double: compiles requests and records what would run."""

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self.rows = rows or []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.writer = FetchRequestSQLWriter()

    async def execute_array(self, text: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        self.calls.append((text, tuple(params)))
        return list(self.rows)

    async def fetch(self, request: FetchRequest) -> list[dict[str, Any]]:
        command = self.writer.write(request)
        return await self.execute_array(command.text, command.params)


@pytest.fixture
def actors() -> list[dict[str, str]]:
    return [dict(a) for a in ACTORS]


@pytest.fixture
def recorder() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
async def sqlite_cn():
    cn = SQLiteConnection(":memory:")
    await cn.connect()
    yield cn
    await cn.close()


@pytest.fixture
async def actor_table(sqlite_cn: SQLiteConnection, actors: list[dict[str, str]]) -> str:
    """``fetchtests`` table in the in-memory database, filled with ACTORS."""
    await sqlite_cn.execute_non_query(
        "CREATE TABLE fetchtests (name varchar(255), surname varchar(255), role varchar(255))"
    )
    for actor in actors:
        await sqlite_cn.insert("fetchtests", actor)
    return "fetchtests"
