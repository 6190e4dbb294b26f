from __future__ import annotations

from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskboard.main import create_app
from taskboard.settings import Settings
from tests.helpers import make_settings


@pytest.fixture()
def app() -> FastAPI:
    # Every test gets its own empty in-memory store
    return create_app(make_settings())


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def sqlite_settings(tmp_path) -> Settings:
    return make_settings(persistence_backend="sqlite", sqlite_db_path=str(tmp_path / "db" / "taskboard.db"))


@pytest.fixture()
def sqlite_client(sqlite_settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(sqlite_settings)) as c:
        yield c
