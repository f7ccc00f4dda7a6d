import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import memory_jar.db.users as users_module
from memory_jar.auth.tokens import new_session_token
from memory_jar.db.session import get_db, init_db
from memory_jar.db.users import create_user
from memory_jar.main import app


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    # lowest cost bcrypt allows; keeps the suite quick
    monkeypatch.setattr(users_module, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def alice(db):
    return create_user(db, name="Alice", email="alice@example.com", password="secret1")


@pytest.fixture
def bob(db):
    return create_user(db, name="Bob", email="bob@example.com", password="secret2")


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {new_session_token(user.id)}"}


@pytest.fixture
def alice_headers(alice):
    return auth_headers(alice)


@pytest.fixture
def bob_headers(bob):
    return auth_headers(bob)
