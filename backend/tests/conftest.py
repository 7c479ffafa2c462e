from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from catalog_api.database import build_engine, get_db
from catalog_api.main import app
from catalog_api.models import Base, Company
from catalog_api.redis_client import get_redis
from catalog_api.services.delivery import repository
from catalog_api.services.delivery.clock import fixed_clock, get_clock
from factories import weekly


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'catalog.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def company_id(db):
    company = Company(name="Distribuidora Norte")
    db.add(company)
    db.commit()
    return company.id


@pytest.fixture
def configured_company(db, company_id):
    """Company with the standard Mon-Fri settings, min_slots_ahead = 0."""
    repository.create_weekly_config(db, weekly(company_id))
    db.commit()
    return company_id


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 8, 0)


@pytest.fixture
def client(session_factory, now):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: None
    app.dependency_overrides[get_clock] = lambda: fixed_clock(now)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
