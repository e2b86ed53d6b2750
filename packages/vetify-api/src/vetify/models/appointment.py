"""Appointment model - a scheduled visit for a pet."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vetify.models.base import Base, TimestampMixin, id_column

APPOINTMENT_STATUSES = (
    "SCHEDULED",
    "CONFIRMED",
    "CHECKED_IN",
    "IN_PROGRESS",
    "COMPLETED",
    "CANCELLED_CLIENT",
    "CANCELLED_CLINIC",
    "NO_SHOW",
)

# No further edits once an appointment reaches one of these, except a status change.
FINAL_STATUSES = frozenset({"COMPLETED", "CANCELLED_CLIENT", "CANCELLED_CLINIC", "NO_SHOW"})


class Appointment(TimestampMixin, Base):
    __tablename__ = "appointments"

    id: Mapped[str] = id_column()
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    pet_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("pets.id", ondelete="CASCADE"), nullable=False
    )
    customer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    location_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="SCHEDULED")

    __table_args__ = (
        Index("ix_appointments_tenant_date", "tenant_id", "date_time"),
        Index("ix_appointments_pet_id", "pet_id"),
    )
