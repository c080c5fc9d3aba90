import os
import random

# Keep the app's own engine (used by the startup hook) off disk
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

import tourney.models  # noqa: E402,F401  registers every table on SQLModel.metadata
from tourney.database import get_session  # noqa: E402
from tourney.main import app  # noqa: E402

# One shared in-memory database: StaticPool hands every session the same connection
test_engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session")
def session_fixture():
    """Fresh tournament schema per test"""
    SQLModel.metadata.drop_all(test_engine)
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """API client whose requests all hit the test database"""
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def rng():
    """Seeded random source so draws are reproducible"""
    return random.Random(1234)
