import pytest
from fastapi.testclient import TestClient

from shortlinks import database


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'links.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    database.dispose()
    yield url
    database.dispose()


@pytest.fixture
def db(db_url):
    database.init_db()
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_url):
    from shortlinks.main import app

    with TestClient(app) as c:
        yield c
