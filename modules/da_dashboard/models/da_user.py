"""
Development Agent Model.

One row per field agent. Rows are provisioned by an external ingestion
process; this service only reads them and updates two fields.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from core.database.base import EXTERNALLY_PROVISIONED, Base, LastUpdated


ACTIVE_STATUS = "Active"


class DAUser(Base):
    """
    Development Agent record.

    Attributes:
        contact_number: Agent phone number, the identity and mutation key.
        reporting_manager_mobile: Phone number of the owning woreda
            representative or manager.
        total_data_collected: Non-negative data collection counter.
        status: "Active" or "Inactive" ("Pending" in a legacy revision).
        last_updated: Stamped on every permitted update.
    """

    __tablename__ = "da_users"
    __table_args__ = {"info": {EXTERNALLY_PROVISIONED: True}}

    contact_number: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        comment="Agent phone number",
    )

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    region: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    zone: Mapped[str | None] = mapped_column(String(128), nullable=True)
    woreda: Mapped[str | None] = mapped_column(String(128), nullable=True)
    kebele: Mapped[str | None] = mapped_column(String(128), nullable=True)

    reporting_manager_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reporting_manager_mobile: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
        index=True,
        comment="Owning woreda representative/manager phone number",
    )

    language: Mapped[str | None] = mapped_column(String(64), nullable=True)

    total_data_collected: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )

    status: Mapped[str | None] = mapped_column(
        String(32),
        default="Active",
        server_default="Active",
        nullable=True,
    )

    last_updated: Mapped[LastUpdated]

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS

    def __repr__(self) -> str:
        return f"<DAUser(contact_number={self.contact_number}, status={self.status})>"
