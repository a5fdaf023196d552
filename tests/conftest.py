"""
Shared pytest fixtures for crudkit tests.

This module provides:
- An in-memory SQLite engine with the address-book schema
- Contacts/tags services over that engine
- A 30-contact seed ("Cont-0" .. "Cont-29")
- A TestClient for the address-book application

Usage:
    Fixtures are auto-discovered by pytest; request them by name.

    def test_something(contacts, seeded_contacts):
        ...
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from crudkit.addressbook import Contact, build_addressbook, create_addressbook_app, init_schema
from crudkit.api.settings import CrudAPISettings
from crudkit.core.orm import create_crud_engine, crud_session_factory
from crudkit.core.service import CrudService

SEED_SIZE = 30


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if test_path.parts[0] == "api":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Storage
# =============================================================================


@pytest.fixture()
def settings() -> CrudAPISettings:
    return CrudAPISettings(database_url="sqlite://", api_prefix="/api")


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database per test (StaticPool keeps one connection)."""
    eng = create_crud_engine("sqlite://")
    init_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return crud_session_factory(engine)


@pytest.fixture()
def addressbook(settings, engine, session_factory):
    return build_addressbook(settings, engine=engine, session_factory=session_factory)


@pytest.fixture()
def contacts(addressbook) -> CrudService:
    return addressbook.contacts


@pytest.fixture()
def tags(addressbook) -> CrudService:
    return addressbook.tags


def make_contacts(count: int = SEED_SIZE) -> list[Contact]:
    return [Contact(full_name=f"Cont-{i}", email=f"c_{i}@gmail.com") for i in range(count)]


@pytest.fixture()
def seeded_contacts(contacts) -> list[Contact]:
    """Insert 30 contacts; returns them in insertion order."""
    return contacts.create_all(make_contacts())


# =============================================================================
# API
# =============================================================================


@pytest.fixture()
def app(settings, engine):
    return create_addressbook_app(settings, engine=engine)


@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def seeded_client(client, app) -> TestClient:
    app.state.addressbook.contacts.create_all(make_contacts())
    return client
