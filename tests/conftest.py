import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from facility_booking.database import get_db, make_engine
from facility_booking.models.generated import Base, Facilities
from facility_booking.routers.deps import get_engine, get_notifier
from facility_booking.services.engine import BookingEngine
from facility_booking.services.store import SqlBookingStore, SqlFacilityDirectory

from tests.helpers import FixedClock, RecordingNotifier


@pytest.fixture
def db_session():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def pool(db_session):
    row = Facilities(id=1, name="Pool", operating_window="09:00-12:00", slot_minutes=60, capacity=10)
    db_session.add(row)
    db_session.commit()
    return row


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db_session, clock, notifier):
    from facility_booking.main import app

    def _get_db():
        yield db_session

    def _get_engine():
        return BookingEngine(
            facilities=SqlFacilityDirectory(db_session),
            store=SqlBookingStore(db_session),
            notifier=notifier,
            clock=clock,
        )

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_engine] = _get_engine
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
