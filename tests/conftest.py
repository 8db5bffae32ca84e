"""
Pytest configuration and shared fixtures.

This module provides fixtures that are available to all test modules.
The environment is pinned before any application module is imported so
that settings, keys and the database URL never come from the developer's
machine.
"""

import os

from cryptography.fernet import Fernet

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_DEFAULTS"] = "false"
os.environ["ENCRYPTION_KEY"] = Fernet.generate_key().decode()
os.environ["SESSION_SECRET_KEY"] = Fernet.generate_key().decode()
os.environ["LEGACY_ENCRYPTION_SECRET"] = "legacy-test-secret"

from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from proposal_maker.config.settings import get_settings  # noqa: E402
from proposal_maker.core.database import Base  # noqa: E402
from proposal_maker.core.encryption import get_encryption_key  # noqa: E402
from proposal_maker.core.security import get_session_key  # noqa: E402
from proposal_maker.core.user_context import reset_current_account  # noqa: E402
from proposal_maker.database.models import Account  # noqa: E402
from tests.fixtures.factories import TEST_API_KEY, create_account  # noqa: E402
from tests.fixtures.model_service import FakeModelService  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """
    Clear cached settings and keys before each test.

    This ensures each test gets fresh settings.
    """
    get_settings.cache_clear()
    get_encryption_key.cache_clear()
    get_session_key.cache_clear()
    reset_current_account()
    yield
    get_settings.cache_clear()
    get_encryption_key.cache_clear()
    get_session_key.cache_clear()
    reset_current_account()


@pytest.fixture(scope="function")
def db_engine():
    """SQLite in-memory engine shared by every session in one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def account(db_session) -> Account:
    """Account without a stored API key."""
    return create_account(db_session)


@pytest.fixture
def account_with_key(db_session) -> Account:
    """Account with a valid (v2) stored API key."""
    return create_account(db_session, email="keyed@example.com", name="Keyed", api_key=TEST_API_KEY)


@pytest.fixture
def model_service() -> FakeModelService:
    """Fake chat completions endpoint; queue replies with ``.reply()``/``.fail()``."""
    return FakeModelService()
