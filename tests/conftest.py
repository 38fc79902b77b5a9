"""
pytest fixtures for the follow graph API.

The database URL must point at SQLite before anything imports
``lovculator``, because the engine is built from settings at import time.
"""
import itertools
import os
import tempfile

_TEST_DB_DIR = tempfile.mkdtemp(prefix="lovculator-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TEST_DB_DIR, "test.db")
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from lovculator.core.security import create_access_token  # noqa: E402
from lovculator.database import Base, SessionLocal, engine  # noqa: E402
from lovculator.main import app  # noqa: E402
from lovculator.models import Follow, User, UserStatus  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    """Factory that inserts a user and returns it."""

    sequence = itertools.count(1)

    def _make_user(user_id=None, username=None, display_name=None, status=UserStatus.active, **extra):
        name = username or f"user{next(sequence)}"
        user = User(
            id=user_id,
            email=f"{name}@lovculator.test",
            username=name,
            displayName=display_name,
            status=status,
            **extra
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def add_edge(db):
    def _add_edge(follower_id, target_id):
        db.add(Follow(followerId=follower_id, targetId=target_id))
        db.commit()

    return _add_edge


@pytest.fixture
def count_edges(db):
    def _count_edges(follower_id=None, target_id=None):
        db.expire_all()
        query = db.query(Follow)
        if follower_id is not None:
            query = query.filter(Follow.followerId == follower_id)
        if target_id is not None:
            query = query.filter(Follow.targetId == target_id)
        return query.count()

    return _count_edges


@pytest.fixture
def auth_headers():
    def _auth_headers(user_id):
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _auth_headers
