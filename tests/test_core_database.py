"""
Unit Tests for core.database layer.

Tests database engine, session management, and base models.
"""

import ssl

import pytest
from unittest.mock import MagicMock, patch, AsyncMock
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


class TestDatabaseEngine:
    """Tests for database engine management."""

    @pytest.fixture(autouse=True)
    def reset_engine(self):
        """Reset global engine before each test."""
        import core.database.engine as engine_module
        engine_module._engine = None
        yield
        engine_module._engine = None

    @patch('core.database.engine.create_async_engine')
    def test_get_engine_creates_singleton(self, mock_create_engine, mock_env_vars):
        """Test get_engine() creates a singleton engine instance."""
        from core.database.engine import get_engine

        mock_engine = MagicMock(spec=AsyncEngine)
        mock_create_engine.return_value = mock_engine

        engine1 = get_engine()
        engine2 = get_engine()

        assert engine1 is engine2
        assert mock_create_engine.call_count == 1

    @patch('core.database.engine.create_async_engine')
    def test_get_engine_uses_config_database_url(self, mock_create_engine, mock_env_vars):
        """Test engine uses database URL and pool settings from config."""
        from core.database.engine import get_engine

        mock_create_engine.return_value = MagicMock(spec=AsyncEngine)

        get_engine()

        args, kwargs = mock_create_engine.call_args
        assert args[0] == mock_env_vars["DATABASE_URL"]
        assert kwargs["pool_pre_ping"] is True
        assert kwargs["pool_recycle"] == 1800

    def test_get_engine_without_url_raises(self, mock_env_vars, monkeypatch):
        """Test get_engine() refuses to start without DATABASE_URL."""
        from core.database.engine import get_engine

        monkeypatch.setenv("DATABASE_URL", "")

        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            get_engine()

    @pytest.mark.asyncio
    @patch('core.database.engine.create_async_engine')
    async def test_close_engine_disposes_connection(self, mock_create_engine, mock_env_vars):
        """Test close_engine() properly disposes the engine."""
        from core.database.engine import get_engine, close_engine
        import core.database.engine as engine_module

        mock_engine = AsyncMock(spec=AsyncEngine)
        mock_create_engine.return_value = mock_engine

        get_engine()
        assert engine_module._engine is not None

        await close_engine()

        mock_engine.dispose.assert_called_once()
        assert engine_module._engine is None


class TestConnectArgs:
    """Tests for SSL handling of the asyncpg driver."""

    def test_ssl_disabled(self, monkeypatch):
        from core.database.engine import _connect_args

        monkeypatch.setenv("DATABASE_SSL_MODE", "disable")

        assert _connect_args("postgresql+asyncpg://u:p@h/db") == {"ssl": None}

    def test_ssl_require_does_not_verify(self, monkeypatch):
        from core.database.engine import _connect_args

        monkeypatch.setenv("DATABASE_SSL_MODE", "require")

        ctx = _connect_args("postgresql+asyncpg://u:p@h/db")["ssl"]

        assert isinstance(ctx, ssl.SSLContext)
        assert ctx.check_hostname is False
        assert ctx.verify_mode == ssl.CERT_NONE

    def test_verify_full_without_cert_falls_back_to_require(self, monkeypatch):
        from core.database.engine import _get_ssl_context

        monkeypatch.setenv("DATABASE_SSL_MODE", "verify-full")
        monkeypatch.delenv("DATABASE_SSL_CERT_PATH", raising=False)

        ctx = _get_ssl_context()

        assert ctx.verify_mode == ssl.CERT_NONE

    def test_non_asyncpg_url_gets_no_ssl_args(self):
        from core.database.engine import _connect_args

        assert _connect_args("sqlite+aiosqlite:///:memory:") == {}


class TestSessionManagement:
    """Tests for database session management."""

    @pytest.fixture(autouse=True)
    def reset_session_factory(self):
        """Reset global session factory before each test."""
        import core.database.session as session_module
        session_module._async_session_factory = None
        yield
        session_module._async_session_factory = None

    @pytest.fixture
    def patched_factory(self):
        """Patch get_session_factory() with a factory yielding a mock session."""
        mock_session = AsyncMock(spec=AsyncSession)
        mock_factory = MagicMock(spec=async_sessionmaker)
        mock_factory.return_value.__aenter__.return_value = mock_session
        mock_factory.return_value.__aexit__.return_value = None
        with patch('core.database.session.get_session_factory', return_value=mock_factory):
            yield mock_session

    @patch('core.database.session.get_engine')
    def test_get_session_factory_creates_singleton(self, mock_get_engine, mock_env_vars):
        """Test get_session_factory() creates a singleton factory."""
        from core.database.session import get_session_factory

        mock_get_engine.return_value = MagicMock(spec=AsyncEngine)

        factory1 = get_session_factory()
        factory2 = get_session_factory()

        assert factory1 is factory2
        assert isinstance(factory1, async_sessionmaker)

    @pytest.mark.asyncio
    async def test_get_db_session_commits_on_success(self, patched_factory):
        """Test get_db_session() commits after the request handler returns."""
        from core.database.session import get_db_session

        gen = get_db_session()
        session = await gen.__anext__()
        assert session is patched_factory

        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

        patched_factory.commit.assert_awaited_once()
        patched_factory.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_db_session_rolls_back_on_error(self, patched_factory):
        """Test get_db_session() rolls back and re-raises handler errors."""
        from core.database.session import get_db_session

        gen = get_db_session()
        await gen.__anext__()

        with pytest.raises(ValueError):
            await gen.athrow(ValueError("handler failed"))

        patched_factory.rollback.assert_awaited_once()
        patched_factory.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_db_connections_resets_factory(self):
        import core.database.session as session_module

        session_module._async_session_factory = MagicMock()
        with patch('core.database.session.close_engine', new_callable=AsyncMock) as mock_close:
            await session_module.close_db_connections()

        mock_close.assert_awaited_once()
        assert session_module._async_session_factory is None


class TestSchemaInit:
    """Tests for init_database() table selection."""

    @pytest.fixture
    def metadata(self):
        from sqlalchemy import Column, Integer, MetaData, Table
        from core.database.base import EXTERNALLY_PROVISIONED

        metadata = MetaData()
        Table("owned", metadata, Column("id", Integer, primary_key=True))
        Table(
            "ingested",
            metadata,
            Column("id", Integer, primary_key=True),
            info={EXTERNALLY_PROVISIONED: True},
        )
        return metadata

    def test_service_owned_tables_skip_externally_provisioned(self, metadata):
        from core.database.session import service_owned_tables

        assert [table.name for table in service_owned_tables(metadata)] == ["owned"]

    @pytest.mark.asyncio
    async def test_init_database_creates_only_service_owned_tables(self, metadata):
        import core.database.session as session_module

        conn = MagicMock()
        conn.run_sync = AsyncMock()
        engine = MagicMock()
        engine.begin.return_value.__aenter__ = AsyncMock(return_value=conn)
        engine.begin.return_value.__aexit__ = AsyncMock(return_value=None)

        with patch('core.database.base.Base.metadata', metadata), \
                patch('core.database.session.get_engine', return_value=engine):
            await session_module.init_database()

        _, kwargs = conn.run_sync.await_args
        assert [table.name for table in kwargs["tables"]] == ["owned"]


class TestBaseModels:
    """Tests for database base models and column annotations."""

    def test_base_class_exists(self):
        """Test Base declarative class exists."""
        from core.database.base import Base
        from sqlalchemy.orm import DeclarativeBase

        assert issubclass(Base, DeclarativeBase)

    def test_utcnow_is_timezone_aware(self):
        from datetime import timezone

        from core.database.base import utcnow

        assert utcnow().tzinfo is timezone.utc

    def test_phone_number_key_annotation(self):
        """Test PhoneNumberKey creates a string primary key."""
        from core.database.base import Base, PhoneNumberKey
        from sqlalchemy.orm import Mapped

        class PhoneKeyModel(Base):
            __tablename__ = "test_phone_key"
            phone_number: Mapped[PhoneNumberKey]

        column = PhoneKeyModel.__table__.columns["phone_number"]
        assert column.primary_key
        assert column.type.length == 32

    def test_last_updated_annotation(self):
        """Test LastUpdated creates a nullable tz-aware timestamp with defaults."""
        from core.database.base import Base, LastUpdated, PhoneNumberKey
        from sqlalchemy.orm import Mapped

        class StampedModel(Base):
            __tablename__ = "test_last_updated"
            phone_number: Mapped[PhoneNumberKey]
            last_updated: Mapped[LastUpdated]

        column = StampedModel.__table__.columns["last_updated"]
        assert column.nullable
        assert column.type.timezone is True
        assert column.default is not None
        assert column.server_default is not None
