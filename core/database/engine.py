"""
Database Engine Management Module.

Provides a singleton AsyncEngine for the entire application.
Uses configuration from core.app_context.ConfigLoader.

SSL Configuration:
    DATABASE_SSL_MODE controls SSL behavior:
    - "verify-full": Full SSL verification with certificate check
    - "require": Require SSL but don't verify certificate (default, for hosted DBs)
    - "prefer": Same as require for asyncpg
    - "disable": No SSL (only for local development)

    DATABASE_SSL_CERT_PATH: Path to CA certificate file (required for verify-full mode)
"""

import logging
import os
import ssl

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from core.app_context import ConfigLoader

_logger = logging.getLogger(__name__)

# Global engine instance (singleton)
_engine: AsyncEngine | None = None


def _get_ssl_context() -> ssl.SSLContext | None:
    """
    Create SSL context based on DATABASE_SSL_MODE environment variable.

    Returns:
        ssl.SSLContext for verify-full, require and prefer modes
        None for disable mode
    """
    ssl_mode = os.getenv("DATABASE_SSL_MODE", "require").lower()

    if ssl_mode == "disable":
        _logger.warning(
            "DATABASE_SSL_MODE=disable: SSL is disabled. "
            "This is insecure and should only be used for local development."
        )
        return None

    if ssl_mode == "verify-full":
        cert_path = os.getenv("DATABASE_SSL_CERT_PATH", "")

        if not cert_path:
            _logger.error(
                "DATABASE_SSL_MODE=verify-full requires DATABASE_SSL_CERT_PATH. "
                "Falling back to 'require' mode."
            )
        else:
            try:
                ctx = ssl.create_default_context(cafile=cert_path)
                ctx.check_hostname = True
                ctx.verify_mode = ssl.CERT_REQUIRED
                _logger.info(f"SSL mode: verify-full with cert: {cert_path}")
                return ctx
            except (OSError, ssl.SSLError) as e:
                _logger.error(
                    f"Failed to load SSL certificate from {cert_path}: {e}. "
                    "Falling back to 'require' mode."
                )
    elif ssl_mode not in ("require", "prefer"):
        _logger.warning(f"Unknown DATABASE_SSL_MODE '{ssl_mode}'. Using 'require' mode.")

    # Require SSL but don't verify certificate
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def _connect_args(database_url: str) -> dict:
    """Driver-specific connect arguments. Only asyncpg takes an SSL context."""
    if database_url.startswith("postgresql+asyncpg"):
        return {"ssl": _get_ssl_context()}
    return {}


def get_engine() -> AsyncEngine:
    """
    Get or create the async database engine (singleton).

    Returns:
        AsyncEngine: SQLAlchemy async engine instance.
    """
    global _engine

    if _engine is None:
        config_loader = ConfigLoader()
        config_loader.load()
        database_url = str(config_loader.get("database.url", ""))

        if not database_url:
            raise RuntimeError("DATABASE_URL not configured")

        _engine = create_async_engine(
            database_url,
            echo=False,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=15,
            pool_recycle=1800,
            connect_args=_connect_args(database_url),
        )

    return _engine


async def close_engine() -> None:
    """
    Close the database engine and release all connections.

    Should be called during application shutdown.
    """
    global _engine

    if _engine is not None:
        await _engine.dispose()
        _engine = None
