import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from heritage_admin.config import settings
from heritage_admin.db import get_db
from heritage_admin.models import Base, AdminUser
from heritage_admin.security.auth import get_password_hash, create_access_token

@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()

@pytest.fixture
def uploads(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "uploads_dir", str(tmp_path))
    monkeypatch.setattr(settings, "s3_access_key", None)
    monkeypatch.setattr(settings, "s3_secret_key", None)
    monkeypatch.setattr(settings, "public_base_url", "http://testserver")
    return tmp_path

@pytest.fixture
def client(db):
    from heritage_admin.main import app
    app.dependency_overrides[get_db] = lambda: db
    # no context manager: startup hooks (create_all, scheduler) stay off
    yield TestClient(app)
    app.dependency_overrides.clear()

def _make_admin(db, email: str, role: str) -> AdminUser:
    admin = AdminUser(email=email, name=role.title(), role=role, is_active=True, password_hash=get_password_hash("s3cret-pass"))
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin

@pytest.fixture
def admin_headers(db):
    admin = _make_admin(db, "admin@heritage.test", "admin")
    return {"Authorization": f"Bearer {create_access_token({'sub': str(admin.id)})}"}

@pytest.fixture
def moderator_headers(db):
    mod = _make_admin(db, "mod@heritage.test", "moderator")
    return {"Authorization": f"Bearer {create_access_token({'sub': str(mod.id)})}"}
