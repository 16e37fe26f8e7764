import os
import tempfile
from datetime import datetime

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_marketplace.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from marketplace.main import app
import marketplace.repositories.product as product_repo
import marketplace.repositories.user as user_repo
from marketplace.services.rental import create_rental


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
        poolclass=None,  # Don't use connection pooling for SQLite
    )

    # WAL reduces locking issues; foreign keys make orphaned rows impossible
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()

        # Clean up - remove test database file and directory
        try:
            if os.path.exists(test_db_path):
                os.remove(test_db_path)
            for suffix in ["-wal", "-shm"]:
                wal_path = f"{test_db_path}{suffix}"
                if os.path.exists(wal_path):
                    os.remove(wal_path)
            if os.path.exists(temp_db_dir):
                os.rmdir(temp_db_dir)
        except OSError as e:
            print(f"Cleanup failed: {e}")


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from marketplace.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def owner(db: Session):
    """User who lists products."""
    return user_repo.create_user(db, email="owner@example.com", name="Product Owner")


@pytest.fixture(scope="function")
def renter(db: Session):
    """User who rents products."""
    return user_repo.create_user(db, email="renter@example.com", name="First Renter")


@pytest.fixture(scope="function")
def another_renter(db: Session):
    """Second renter competing for the same product."""
    return user_repo.create_user(db, email="renter2@example.com", name="Second Renter")


@pytest.fixture(scope="function")
def product(db: Session, owner):
    """An AVAILABLE product owned by `owner`."""
    return product_repo.create_product(
        db,
        owner_id=owner.id,
        title="Mountain bike",
        description="27.5 inch, hydraulic brakes",
        price=25.0,
        deposit=100.0,
        location="Berlin",
    )


@pytest.fixture(scope="function")
def make_rental(db: Session):
    """Create a rental through the coordinator with sensible defaults."""

    def _make_rental(product_id: int, owner_id: int, renter_id: int, **overrides):
        params = {
            "start_date": datetime(2026, 1, 10, 10, 0),
            "end_date": datetime(2026, 1, 12, 10, 0),
            "total_price": 100.0,
        }
        params.update(overrides)
        return create_rental(
            db,
            product_id=product_id,
            owner_id=owner_id,
            renter_id=renter_id,
            **params,
        )

    return _make_rental
