"""
Feedback Forms API - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import Generator

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

# Set testing environment before the app reads its settings
TEST_DIR = tempfile.mkdtemp(prefix="feedback_app_tests_")
os.environ['DATABASE_URL'] = f"sqlite:///{os.path.join(TEST_DIR, 'test.db')}"
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['ENVIRONMENT'] = 'test'
os.environ['LOG_DIR'] = os.path.join(TEST_DIR, 'logs')
os.environ['BCRYPT_ROUNDS'] = '4'

from feedback_app.main import app
from feedback_app.db.base import Base
from feedback_app.db.session import engine, get_db
from feedback_app.models.user import User
from feedback_app.core.security.auth import create_hashed_password, generate_token

fake = Faker()

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CUSTOMER_SURVEY = {
    "title": "Customer Survey",
    "questions": [
        {
            "text": "How satisfied are you with our service?",
            "type": "multiple-choice",
            "options": ["Very Satisfied", "Satisfied", "Neutral"],
        },
        {"text": "What could we improve?", "type": "text"},
        {
            "text": "Would you recommend us?",
            "type": "multiple-choice",
            "options": ["Yes", "No"],
        },
    ],
}


@pytest.fixture(scope='function')
def db_session() -> Generator[Session, None, None]:
    """Create fresh tables and a session for each test"""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create test client with database override"""
    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db_session: Session, password: str = 'testpassword123') -> User:
    user = User(
        name=fake.name(),
        email=fake.unique.email(),
        hashed_password=create_hashed_password(password)
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session: Session) -> User:
    """Create a test user"""
    return make_user(db_session)


@pytest.fixture
def other_user(db_session: Session) -> User:
    """A second user who owns nothing the tests create"""
    return make_user(db_session)


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return {'Authorization': f'Bearer {generate_token(test_user)}'}


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return {'Authorization': f'Bearer {generate_token(other_user)}'}


@pytest.fixture
def survey(client: TestClient, auth_headers: dict) -> dict:
    """The customer survey, created by test_user"""
    response = client.post('/api/forms', json=CUSTOMER_SURVEY, headers=auth_headers)
    assert response.status_code == 201
    return response.json()['form']
