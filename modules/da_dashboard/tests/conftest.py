"""
Conftest for DA Dashboard Module Tests.

Query builders and services run for real against an in-memory SQLite
database. Most tests use SQLAlchemy's synchronous engine with
SyncSessionAdapter giving the async services the AsyncSession methods they
call; the async_db fixtures use a real AsyncSession over aiosqlite.
"""

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from core.database.base import Base
from core.dependencies import get_db
from core.server import register_error_handlers
from modules.da_dashboard.core.config import DashboardSettings, get_dashboard_settings
from modules.da_dashboard.dashboard_module import DADashboardModule
from modules.da_dashboard.models import DAUser, WoredaManager, WoredaRep
from modules.da_dashboard.services.principal import Principal, PrincipalKind
from modules.da_dashboard.services.token_codec import encode_token

JWT_SECRET = "da-dashboard-test-secret"

REP_PHONE = "0911000111"
MANAGER_PHONE = "0922000222"
OTHER_REP_PHONE = "0933000333"


# =============================================================================
# Environment / Settings
# =============================================================================


@pytest.fixture(autouse=True)
def jwt_env(monkeypatch):
    """Token signing configuration and a fresh settings cache for every test."""
    monkeypatch.setenv("JWT_SECRET_KEY", JWT_SECRET)
    monkeypatch.setenv("JWT_ALGORITHM", "HS256")
    get_dashboard_settings.cache_clear()
    yield
    get_dashboard_settings.cache_clear()


@pytest.fixture
def settings():
    """Default dashboard settings."""
    return DashboardSettings()


@pytest.fixture
def make_settings(settings):
    """Factory for settings with selected fields overridden."""
    def _make(**overrides) -> DashboardSettings:
        return settings.model_copy(update=overrides)
    return _make


# =============================================================================
# Principals
# =============================================================================


@pytest.fixture
def admin():
    return Principal(PrincipalKind.ADMINISTRATOR, "Admin@123")


@pytest.fixture
def view_only_admin():
    return Principal(PrincipalKind.VIEW_ONLY_ADMINISTRATOR, "Admin123")


@pytest.fixture
def amhara_manager():
    return Principal(PrincipalKind.REGIONAL_MANAGER, "amhara@123", region="Amhara")


@pytest.fixture
def woreda_rep():
    return Principal(PrincipalKind.WOREDA_REPRESENTATIVE, REP_PHONE)


@pytest.fixture
def woreda_manager():
    return Principal(PrincipalKind.WOREDA_MANAGER, MANAGER_PHONE)


# =============================================================================
# Database
# =============================================================================


class SyncSessionAdapter:
    """Async facade over a synchronous Session."""

    def __init__(self, session: Session) -> None:
        self.sync_session = session

    async def execute(self, statement, *args, **kwargs):
        return self.sync_session.execute(statement, *args, **kwargs)

    async def scalar(self, statement, *args, **kwargs):
        return self.sync_session.scalar(statement, *args, **kwargs)

    async def get(self, entity, ident):
        return self.sync_session.get(entity, ident)

    async def commit(self) -> None:
        self.sync_session.commit()

    async def rollback(self) -> None:
        self.sync_session.rollback()

    async def refresh(self, instance) -> None:
        self.sync_session.refresh(instance)

    async def run_sync(self, fn, *args, **kwargs):
        return fn(self.sync_session, *args, **kwargs)


def sample_da_users() -> list[DAUser]:
    return [
        DAUser(
            contact_number="0900000001", name="Abebe", region="Amhara", zone="North Shewa",
            woreda="Basona", kebele="01", reporting_manager_name="Rep One",
            reporting_manager_mobile=REP_PHONE, language="Amharic",
            total_data_collected=120, status="Active",
        ),
        DAUser(
            contact_number="0900000002", name="belay", region=" amhara ", zone="North Shewa",
            woreda="Ankober", kebele="02", reporting_manager_name="Rep One",
            reporting_manager_mobile=REP_PHONE, language="Amharic",
            total_data_collected=300, status="Active",
        ),
        DAUser(
            contact_number="0900000003", name="Chala", region="Oromia", zone="East Shewa",
            woreda="Adama", kebele="03", reporting_manager_name="Manager Two",
            reporting_manager_mobile=MANAGER_PHONE, language="Afaan Oromo",
            total_data_collected=50, status="Inactive",
        ),
        DAUser(
            contact_number="0900000004", name="Dawit", region="Oromia", zone="East Shewa",
            woreda="Adama", kebele="04", reporting_manager_name="Manager Two",
            reporting_manager_mobile=MANAGER_PHONE, language="Afaan Oromo",
            total_data_collected=0, status="Active",
        ),
        DAUser(
            contact_number="0900000005", name="Eden", region="", zone="",
            woreda=None, kebele=None, reporting_manager_name="Rep One",
            reporting_manager_mobile=REP_PHONE, language=None,
            total_data_collected=10, status="pending",
        ),
        DAUser(
            contact_number="0900000006", name="almaz", region="Amhara", zone="South Wollo",
            woreda="Dessie", kebele="05", reporting_manager_name="Rep Three",
            reporting_manager_mobile=OTHER_REP_PHONE, language="Amharic",
            total_data_collected=300, status="Active",
        ),
        DAUser(
            contact_number="0900000007", name="Hana", region="ሲዳማ", zone="Hawassa",
            woreda="Hawassa Zuria", kebele="06", reporting_manager_name="Rep Three",
            reporting_manager_mobile=OTHER_REP_PHONE, language="Sidaamu Afoo",
            total_data_collected=75, status="Inactive",
        ),
    ]


def sample_woreda_reps() -> list[WoredaRep]:
    return [
        WoredaRep(phone_number=REP_PHONE, name="Rep One"),
        WoredaRep(phone_number=OTHER_REP_PHONE, name="Rep Three"),
    ]


def sample_woreda_manager() -> WoredaManager:
    return WoredaManager(phone_number=MANAGER_PHONE, password="4821", manager_name="Manager Two")


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine shared across threads (TestClient runs the app in a worker)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(
        engine,
        tables=[DAUser.__table__, WoredaRep.__table__, WoredaManager.__table__],
    )
    yield engine
    engine.dispose()


@pytest.fixture
def sync_session(sqlite_engine):
    """Seeded synchronous session."""
    with Session(sqlite_engine, expire_on_commit=False) as session:
        session.add_all(sample_da_users())
        session.add_all(sample_woreda_reps())
        session.add(sample_woreda_manager())
        session.commit()
        yield session


@pytest.fixture
def db(sync_session):
    """Seeded session exposed through the async methods the services use."""
    return SyncSessionAdapter(sync_session)


@pytest_asyncio.fixture
async def async_engine():
    """In-memory SQLite behind a real async engine. No tables are created."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    yield engine
    await engine.dispose()


@pytest.fixture
def provision_tables(async_engine):
    """Create the given model tables, the way the offline ingestion job does."""
    async def _provision(*models) -> None:
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, tables=[model.__table__ for model in models])
    return _provision


@pytest_asyncio.fixture
async def async_db(async_engine, provision_tables):
    """Seeded AsyncSession with every table provisioned."""
    await provision_tables(DAUser, WoredaRep, WoredaManager)
    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        session.add_all(sample_da_users())
        session.add_all(sample_woreda_reps())
        session.add(sample_woreda_manager())
        await session.commit()
        yield session


@pytest_asyncio.fixture
async def rep_only_async_db(async_engine, provision_tables):
    """Seeded AsyncSession where woreda_managers has not been provisioned."""
    await provision_tables(DAUser, WoredaRep)
    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        session.add_all(sample_da_users())
        session.add_all(sample_woreda_reps())
        await session.commit()
        yield session


@pytest.fixture
def mock_db_session():
    """Create mock async database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def empty_db(sqlite_engine):
    """Unseeded session behind the async facade."""
    with Session(sqlite_engine) as session:
        yield SyncSessionAdapter(session)


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def app(db):
    """FastAPI app serving the module router against the seeded database."""
    application = FastAPI()
    register_error_handlers(application)

    module = DADashboardModule()
    module.on_entry(MagicMock())
    application.include_router(module.get_api_router(), prefix="/api")

    async def override_get_db():
        yield db

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a principal."""
    def _headers(principal: Principal) -> dict[str, str]:
        token, _ = encode_token(principal)
        return {"Authorization": f"Bearer {token}"}
    return _headers
