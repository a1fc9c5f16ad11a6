"""Shared fixtures: in-memory database, seeded catalog/staff, Redis double."""
import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salon.models.generated import (
    Base,
    Combos,
    ComboServices,
    Discounts,
    Employees,
    ServiceCategories,
    Services,
    t_employee_services,
)
from salon.services.slots import BusinessCalendar


# Service / employee ids used across tests
HAIRCUT_ID = 1      # 60 min, 10000 cents
COLOR_ID = 2        # 90 min, 20000 cents
MANICURE_ID = 3     # 30 min, 5000 cents
SPA_COMBO_ID = 1    # haircut + 2 × manicure = 120 min

ANA_ID = 1          # haircut, color, manicure
BEA_ID = 2          # haircut, manicure


def next_weekday(start: date, weekday: int) -> date:
    """First date strictly after start falling on weekday (0 = Monday)."""
    days = (weekday - start.weekday()) % 7 or 7
    return start + timedelta(days=days)


class FakeRedis:
    """In-memory stand-in for the redis calls the draft store makes."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    def get(self, key):
        return self.data.get(key)

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.ttls.pop(key, None)
                deleted += 1
        return deleted

    def ping(self):
        return True


@pytest.fixture
def calendar():
    return BusinessCalendar(
        open_hour=9,
        close_hour=18,
        slot_granularity_minutes=30,
        closed_weekdays=frozenset({6}),
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
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
def seeded_db(db):
    """Catalog with three services, one combo, one discount; two employees."""
    db.add(ServiceCategories(id=1, name="Hair", display_order=1))
    db.add(ServiceCategories(id=2, name="Nails", display_order=2))
    db.add_all([
        Services(id=HAIRCUT_ID, name="Haircut", duration_minutes=60, price_cents=10000, category_id=1),
        Services(id=COLOR_ID, name="Color", duration_minutes=90, price_cents=20000, category_id=1),
        Services(id=MANICURE_ID, name="Manicure", duration_minutes=30, price_cents=5000, category_id=2),
    ])
    db.add(Combos(
        id=SPA_COMBO_ID,
        name="Spa Day",
        total_price_cents=18000,
        original_price_cents=20000,
    ))
    db.add_all([
        ComboServices(combo_id=SPA_COMBO_ID, service_id=HAIRCUT_ID, quantity=1),
        ComboServices(combo_id=SPA_COMBO_ID, service_id=MANICURE_ID, quantity=2),
    ])
    db.add(Discounts(
        id=1,
        service_id=HAIRCUT_ID,
        name="Ten percent",
        discount_type="percentage",
        discount_value=10,
    ))
    db.add_all([
        Employees(id=ANA_ID, full_name="Ana Mora"),
        Employees(id=BEA_ID, full_name="Bea Solis"),
    ])
    db.flush()
    db.execute(t_employee_services.insert(), [
        {"employee_id": ANA_ID, "service_id": HAIRCUT_ID},
        {"employee_id": ANA_ID, "service_id": COLOR_ID},
        {"employee_id": ANA_ID, "service_id": MANICURE_ID},
        {"employee_id": BEA_ID, "service_id": HAIRCUT_ID},
        {"employee_id": BEA_ID, "service_id": MANICURE_ID},
    ])
    db.commit()
    return db


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(seeded_db, session_factory, fake_redis):
    """FastAPI test client bound to the seeded in-memory database."""
    from salon.database import get_db
    from salon.main import app
    from salon.redis_client import get_redis

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_redis] = lambda: fake_redis
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
