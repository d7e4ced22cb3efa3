"""Pytest fixtures for testing"""

import pytest
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from treasury_pooling.api.main import create_app
from treasury_pooling.infrastructure.database.models import Base
from treasury_pooling.infrastructure.database.session import get_db
from treasury_pooling.domain.models import BorrowingTenor, ClientEntry
from treasury_pooling.domain.reference_data import ReferenceData
from tests.factories import position


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def reference() -> ReferenceData:
    return ReferenceData()


@pytest.fixture
def sample_entries() -> List[ClientEntry]:
    """Four-country APAC book: one client per convertibility flavour plus India"""
    return [
        ClientEntry(
            client_name="APAC Freely Convertible",
            operating_country="Singapore",
            currencies=[
                position("USD", 1_000_000, 500_000, 2.5, 3.5),
                position("SGD", 750_000, 250_000, 1.8, 2.8),
            ],
        ),
        ClientEntry(
            client_name="China Restricted",
            operating_country="China",
            currencies=[
                position("CNY", 2_000_000, 1_000_000, 1.5, 2.5, BorrowingTenor.LONG_TERM),
                position("USD", 1_500_000, 750_000, 2.3, 3.3),
            ],
        ),
        ClientEntry(
            client_name="Malaysia Partially Convertible",
            operating_country="Malaysia",
            currencies=[
                position("MYR", 3_000_000, 1_500_000, 3.0, 4.0),
                position("USD", 800_000, 400_000, 2.4, 3.4, BorrowingTenor.LONG_TERM),
            ],
        ),
        ClientEntry(
            client_name="India Restricted",
            operating_country="India",
            currencies=[
                position("INR", 4_000_000, 2_000_000, 4.5, 5.5),
                position("USD", 1_200_000, 600_000, 2.2, 3.2, BorrowingTenor.LONG_TERM),
            ],
        ),
    ]


@pytest.fixture
def sample_payload(sample_entries: List[ClientEntry]) -> dict:
    """sample_entries in the camelCase wire format"""
    return {"entries": [entry.to_dict() for entry in sample_entries]}
