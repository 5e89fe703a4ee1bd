"""
Woreda Manager Credential Model.

Used by the manager_table credential scheme. Rows are written by an offline
population job; the service only reads them. Passwords are short plaintext
numeric strings.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from core.database.base import EXTERNALLY_PROVISIONED, Base, PhoneNumberKey


class WoredaManager(Base):
    """Per-manager login credential, keyed by phone number."""

    __tablename__ = "woreda_managers"
    __table_args__ = {"info": {EXTERNALLY_PROVISIONED: True}}

    phone_number: Mapped[PhoneNumberKey]

    password: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        comment="3-4 digit numeric password",
    )

    manager_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<WoredaManager(phone_number={self.phone_number})>"
