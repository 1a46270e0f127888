from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env.test"
load_dotenv(env_file)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import gymdesk.db.base  # noqa: E402, F401
from gymdesk.core import redis as redis_module  # noqa: E402
from gymdesk.core.security import create_access_token  # noqa: E402
from gymdesk.db.session import Base, get_db  # noqa: E402
from gymdesk.main import app  # noqa: E402
from gymdesk.staff.models.staff import StaffRole  # noqa: E402
from tests.utils.factories import create_staff_factory  # noqa: E402


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="session")
def test_session_local(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(test_session_local):
    session = test_session_local()

    session.commit = session.flush

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
async def test_app(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    # Cache helpers fall through to the database without a client
    redis_module.redis_client = None

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture
def test_admin(db_session):
    return create_staff_factory(
        db_session, email="admin@gym.example.com", full_name="Alex Admin", role=StaffRole.ADMIN
    )


@pytest.fixture
def test_trainer(db_session):
    return create_staff_factory(
        db_session,
        email="trainer@gym.example.com",
        full_name="Tara Trainer",
        role=StaffRole.TRAINER,
    )


@pytest.fixture
def test_staff(db_session):
    return create_staff_factory(
        db_session, email="desk@gym.example.com", full_name="Sam Desk", role=StaffRole.STAFF
    )


@pytest.fixture
def test_admin_token(test_admin):
    return create_access_token({"sub": str(test_admin.id)})


@pytest.fixture
def test_trainer_token(test_trainer):
    return create_access_token({"sub": str(test_trainer.id)})


@pytest.fixture
def test_staff_token(test_staff):
    return create_access_token({"sub": str(test_staff.id)})
