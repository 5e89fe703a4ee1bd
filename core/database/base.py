"""
Database Base Model Module.

Defines the declarative base and common column annotations.
All modules should inherit from this Base class.
"""

from datetime import datetime, timezone
from typing import Annotated

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Table.info key for tables created and populated outside this service.
# init_database() never creates them.
EXTERNALLY_PROVISIONED = "externally_provisioned"


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# Custom type annotations for common column types
PhoneNumberKey = Annotated[
    str,
    mapped_column(
        String(32),
        primary_key=True,
    ),
]

LastUpdated = Annotated[
    datetime | None,
    mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=utcnow,
        server_default=func.now(),
    ),
]


class Base(DeclarativeBase):
    """
    Declarative base class for all SQLAlchemy models.

    All models across the framework should inherit from this base class.
    """
    pass
