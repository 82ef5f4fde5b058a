import os

# Must be set before the application modules read their settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

import fakeredis
import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from doctor_booking.main import app
from doctor_booking.core.database import get_db, get_redis, Base
from doctor_booking.core.security import UserRole, get_password_hash
from doctor_booking.models import User, Patient, Doctor, DoctorStatus

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "TestPassword123"

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(scope="function")
def test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client(test_db):
    redis_client = fakeredis.FakeRedis(decode_responses=True)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: redis_client
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def future_day():
    return date.today() + timedelta(days=7)

def _make_user(db, email, role):
    user = User(email=email, password_hash=get_password_hash(PASSWORD), role=role, is_active=True)
    db.add(user)
    db.flush()
    return user

def make_patient(db, email="patient@example.com", first_name="Pat", last_name="Ient"):
    user = _make_user(db, email, UserRole.PATIENT)
    patient = Patient(user_id=user.id, first_name=first_name, last_name=last_name)
    db.add(patient)
    db.commit()
    db.refresh(patient)
    return patient

def make_doctor(db, email="doctor@example.com", status=DoctorStatus.ACTIVE,
                first_name="Gregory", last_name="House", specialization="Diagnostics"):
    user = _make_user(db, email, UserRole.DOCTOR)
    doctor = Doctor(
        user_id=user.id,
        first_name=first_name,
        last_name=last_name,
        specialization=specialization,
        status=status
    )
    db.add(doctor)
    db.commit()
    db.refresh(doctor)
    return doctor

def make_admin(db, email="admin@example.com"):
    user = _make_user(db, email, UserRole.ADMIN)
    db.commit()
    return user

def auth_headers(client, email):
    response = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
