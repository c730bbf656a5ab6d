"""Pytest configuration and shared fixtures."""

import os

# Settings are cached on first use; pin them before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ROLE_CACHE_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.core.roles.cache import RoleListingCache
from backoffice.core.security import create_access_token
from backoffice.db.base import Base
from backoffice.db.session import enable_sqlite_foreign_keys
from backoffice.db import models  # noqa: F401

from tests.factories import create_role, create_super_admin, create_user


class FakeRedis:
    """Dict-backed stand-in for the few Redis commands the role cache uses."""

    def __init__(self):
        self.store = {}

    def ping(self):
        return True

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, ex=None):
        self.store[key] = value
        return True

    def incr(self, key):
        value = int(self.store.get(key) or 0) + 1
        self.store[key] = str(value)
        return value


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def role_cache(fake_redis):
    return RoleListingCache(client=fake_redis, ttl=60, enabled=True)


@pytest.fixture
def role_factory(db_session):
    def factory(**kwargs):
        role = create_role(db_session, **kwargs)
        db_session.commit()
        return role
    return factory


@pytest.fixture
def user_factory(db_session):
    def factory(**kwargs):
        user = create_user(db_session, **kwargs)
        db_session.commit()
        return user
    return factory


@pytest.fixture
def super_admin(db_session):
    user = create_super_admin(db_session, email="admin@example.com")
    db_session.commit()
    return user


@pytest.fixture
def client(db_session, role_cache):
    from backoffice.api.deps import get_db, get_role_cache
    from backoffice.api.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_role_cache] = lambda: role_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def make(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return make
