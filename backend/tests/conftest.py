"""
Ownership AI - Test Configuration
================================
pytest fixtures and configuration for backend tests
Uses in-memory SQLite (StaticPool) so tests run without a database server
"""

import os
from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv

# Load .env file first (optional local overrides)
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["LOG_FORMAT"] = "text"

# Now import app modules
from app.main import app
from app.database import Base, get_db, json_serializer
from app.models import Customer, Program


# Test database setup - SQLite in-memory, single shared connection
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    json_serializer=json_serializer,
)


@event.listens_for(test_engine, "connect")
def _sqlite_connect(dbapi_connection, connection_record):
    # pysqlite 트랜잭션을 SQLAlchemy가 직접 관리해야 SAVEPOINT가 동작함
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(test_engine, "begin")
def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after each test for isolation
        Base.metadata.drop_all(bind=test_engine)


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============ Test data fixtures ============


@pytest.fixture
def sample_customer_data():
    """Sample customer payload (matches CustomerCreate schema)."""
    return {
        "business_number": "1234567890",
        "business_type": "CORPORATE",
        "corporate_number": "1101111234567",
        "name": "오너십 테크",
        "industry": "IT",
        "company_size": "소기업",
        "location": "서울",
        "budget": 50000000,
        "keywords": ["funding", "hiring"],
        "contact_email": "ceo@ownership.co.kr",
        "contact_phone": "02-1234-5678",
    }


@pytest.fixture
def sample_program_data():
    """Sample program payload (matches ProgramCreate schema)."""
    return {
        "data_source": "기업마당",
        "source_api_id": "PBLN_000000000000001",
        "title": "중소기업 정책자금 지원",
        "category": "금융",
        "target_audience": ["전체"],
        "target_location": ["서울"],
        "keywords": ["funding", "export"],
        "deadline": (datetime.utcnow() + timedelta(days=30)).isoformat(),
    }


@pytest.fixture
def make_customer(db_session):
    """Customer factory persisted in the test session."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "business_number": f"{1000000000 + counter['n']}",
            "business_type": "INDIVIDUAL",
            "name": f"고객 {counter['n']}",
            "industry": "IT",
            "location": "서울",
            "keywords": ["funding", "hiring"],
        }
        values.update(overrides)
        customer = Customer(**values)
        db_session.add(customer)
        db_session.commit()
        db_session.refresh(customer)
        return customer

    return _make


@pytest.fixture
def make_program(db_session):
    """Program factory persisted in the test session."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        values = {
            "data_source": "기업마당",
            "source_api_id": f"PBLN_{counter['n']:015d}",
            "title": f"지원사업 {counter['n']}",
            "target_audience": ["전체"],
            "target_location": ["서울"],
            "keywords": ["funding", "export"],
            "registered_at": datetime.utcnow() - timedelta(minutes=counter["n"]),
        }
        values.update(overrides)
        program = Program(**values)
        db_session.add(program)
        db_session.commit()
        db_session.refresh(program)
        return program

    return _make
