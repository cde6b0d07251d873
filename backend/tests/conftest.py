import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# 1) Import the app and the dependencies we swap out
from social.main     import app, get_presence
from social.database import get_db, init_db
from social.presence import PresenceTracker


class FakeClock:
    """Millisecond clock that only moves when a test says so."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


# 2) A fresh file-backed SQLite database per test; a file (not :memory:)
#    so concurrent sessions on different threads see the same data
@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False}
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


# 3) Raw SQLAlchemy session for tests that call the core directly
@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def presence(clock):
    return PresenceTracker(clock=clock)


# 4) Override get_db / get_presence so every request uses the test store and tracker
@pytest.fixture()
def client(session_factory, presence):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_presence] = lambda: presence
    yield TestClient(app)
    app.dependency_overrides.clear()
