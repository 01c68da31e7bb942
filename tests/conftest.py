import pytest
from fastapi.testclient import TestClient

from todo_api.db import Database
from todo_api.main import create_app
from todo_api.settings import Settings

# Fresh in-memory database per test; StaticPool keeps it on one connection
TEST_DB_URL = "sqlite://"


@pytest.fixture
def settings():
    return Settings(database_url=TEST_DB_URL)


@pytest.fixture
def database():
    return Database(TEST_DB_URL)


@pytest.fixture
def app(settings, database):
    return create_app(settings, database=database)


@pytest.fixture
def client(app):
    # Entering the client runs the lifespan, which creates the schema
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session(database):
    database.create_all()
    s = database.session()
    try:
        yield s
    finally:
        s.close()
        database.dispose()
