from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salon_backend.fastapi.crud.staff import create_staff
from salon_backend.fastapi.dependencies.database import Base, get_sync_db, init_db
from salon_backend.fastapi.main import app
from salon_backend.fastapi.schemas.staff import StaffCreate


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_sync_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_sync_db] = override_get_sync_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def staff(db):
    return create_staff(db, StaffCreate(
        name="Ana Lopez",
        position="stylist",
        base_salary=Decimal("30000"),
        ot_rate_per_hour=Decimal("50"),
    ))
