"""Pytest configuration and fixtures."""

import os

# Keep bcrypt fast in tests; must be set before src.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from src.database import Base, get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models.enums import Role  # noqa: E402
from src.services.auth import create_user, get_password_hash  # noqa: E402
from src.services.email import EmailDeliveryError, get_email_service  # noqa: E402
from src.services.geocoder import GeocodedLocation, GeocodingError, get_geocoder  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores user info."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class FakeEmailService:
    """Records outgoing mail instead of talking to SMTP."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, message):
        if self.fail:
            raise EmailDeliveryError("SMTP unavailable")
        self.sent.append(message)


class FakeGeocoder:
    """Resolves queries from a fixed table of known places."""

    PLACES = {
        "02118": GeocodedLocation(
            latitude=42.3375,
            longitude=-71.0716,
            city="Boston",
            state="MA",
            zipcode="02118",
            country="US",
        ),
        "233 Bay State Rd Boston MA 02215": GeocodedLocation(
            latitude=42.3505,
            longitude=-71.1054,
            street="233 Bay State Rd",
            city="Boston",
            state="MA",
            zipcode="02215",
            country="US",
        ),
        "45 Upper College Rd Kingston RI 02881": GeocodedLocation(
            latitude=41.4807,
            longitude=-71.5258,
            street="45 Upper College Rd",
            city="Kingston",
            state="RI",
            zipcode="02881",
            country="US",
        ),
        "1 Dr Carlton B Goodlett Pl San Francisco CA 94102": GeocodedLocation(
            latitude=37.7793,
            longitude=-122.4193,
            street="1 Dr Carlton B Goodlett Pl",
            city="San Francisco",
            state="CA",
            zipcode="94102",
            country="US",
        ),
    }

    async def geocode(self, query):
        if query not in self.PLACES:
            raise GeocodingError(f"No location found for '{query}'")
        return self.PLACES[query]


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/devcamper", "/devcamper_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture(scope="function")
def client(db, email_service, geocoder):
    """Create a test client with database and collaborator overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, name, email, password="testpass123", role="user") -> AuthHeaders:
    """Register a user and return bearer headers for them.

    The auth cookie set by the server is dropped so that tests always say
    explicitly who they are acting as.
    """
    response = client.post(
        "/api/v1/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 200, response.text
    client.cookies.clear()
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=email,
    )


def make_admin(db, email, password="adminpass123") -> None:
    """Create an admin directly in the store (admins cannot self-register)."""
    create_user(db, "Admin", email, get_password_hash(password), Role.ADMIN)


@pytest.fixture
def register_user(client):
    """Return a function that registers a user and returns their headers."""

    def _register(name, email, password="testpass123", role="user"):
        return register(client, name, email, password=password, role=role)

    return _register


@pytest.fixture
def auth_headers(client):
    """Create a regular user and return auth headers with user info."""
    return register(client, "Test User", "test@example.com")


@pytest.fixture
def publisher_headers(client):
    """Create a publisher and return auth headers with user info."""
    return register(client, "Publisher", "publisher@example.com", role="publisher")


@pytest.fixture
def admin_headers(client, db):
    """Create an admin and return auth headers obtained through login."""
    make_admin(db, "admin@example.com")
    response = client.post(
        "/api/v1/auth/login", json={"email": "admin@example.com", "password": "adminpass123"}
    )
    assert response.status_code == 200, response.text
    client.cookies.clear()
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email="admin@example.com",
    )


@pytest.fixture
def bootcamp_payload():
    return {
        "name": "Devworks Bootcamp",
        "description": "Devworks is a full stack JavaScript Bootcamp located in Boston",
        "website": "https://devworks.com",
        "phone": "(111) 111-1111",
        "email": "enroll@devworks.com",
        "address": "233 Bay State Rd Boston MA 02215",
        "careers": ["Web Development", "UI/UX", "Business"],
        "housing": True,
        "job_assistance": True,
        "job_guarantee": False,
        "accept_gi": True,
    }


@pytest.fixture
def bootcamp(client, publisher_headers, bootcamp_payload):
    """A bootcamp owned by the publisher fixture."""
    response = client.post("/api/v1/bootcamps", headers=publisher_headers, json=bootcamp_payload)
    assert response.status_code == 201, response.text
    return response.json()
