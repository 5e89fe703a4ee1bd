"""
Woreda Representative Model.

Used by the representative credential scheme: a representative logs in
with their phone number and the shared fixed secret.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from core.database.base import EXTERNALLY_PROVISIONED, Base, PhoneNumberKey


class WoredaRep(Base):
    """Woreda representative, keyed by phone number."""

    __tablename__ = "woreda_reps"
    __table_args__ = {"info": {EXTERNALLY_PROVISIONED: True}}

    phone_number: Mapped[PhoneNumberKey]

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<WoredaRep(phone_number={self.phone_number})>"
