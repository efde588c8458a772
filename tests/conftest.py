import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.models.base import Base
from app.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.user import User
from app.models.group import Group
from app.models.role import Role
from app.models.records import GroupRecord, RoleRecord, UserRecord
from app.models.scope import Scope
from app.models.tenant_context import TenantContext
from app.repositories.store_factory import memory_stores, sql_stores
from app.services.scope_resolver import ScopeResolver
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

HOME = Scope.home()
ACME = Scope.account("acc-1", "Acme")
GLOBEX = Scope.account("acc-2", "Globex")

HOME_CONTEXT = TenantContext()
ACME_CONTEXT = TenantContext(account_id="acc-1", account_name="Acme")
GLOBEX_CONTEXT = TenantContext(account_id="acc-2", account_name="Globex")


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(params=["sql", "memory"])
def stores(request):
    """Entity stores for engine tests, once per storage backend"""
    if request.param == "sql":
        return sql_stores(request.getfixturevalue("db_session"))
    return memory_stores()


@pytest.fixture
def resolver():
    return ScopeResolver(home_tenant_name="systiva", strict=False)


def make_user(stores, scope=HOME, email="jane@example.com", groups=None) -> UserRecord:
    return stores.users.put(
        scope,
        UserRecord(
            first_name="Jane",
            last_name="Doe",
            email_address=email,
            assigned_groups=list(groups or []),
        ),
    )


def make_group(stores, name, scope=HOME, **fields) -> GroupRecord:
    return stores.groups.put(scope, GroupRecord(name=name, **fields))


def make_role(stores, name, scope=HOME) -> RoleRecord:
    return stores.roles.put(scope, RoleRecord(name=name, scope_config={"pipelines": [{"resource": "build"}]}))


def create_test_token(user_id: str = "operator-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: Operator ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


@pytest.fixture
def api_stores(db_session):
    """SQL stores sharing the session the test client uses"""
    return sql_stores(db_session)
