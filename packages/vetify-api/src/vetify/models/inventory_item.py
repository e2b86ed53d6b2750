"""Inventory item model - stock of a medicine, vaccine or supply at a clinic."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vetify.models.base import Base, TimestampMixin, id_column


class InventoryItem(TimestampMixin, Base):
    __tablename__ = "inventory_items"

    id: Mapped[str] = id_column()
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    location_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active_compound: Mapped[str | None] = mapped_column(String(255), nullable=True)
    presentation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    measure: Mapped[str | None] = mapped_column(String(50), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True)
    quantity: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=0
    )
    min_stock: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    expiration_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # DISCONTINUED is the soft-deleted state.
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    batch_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    special_notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    storage_location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    cost: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    price: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)

    __table_args__ = (
        Index("ix_inventory_items_tenant_location", "tenant_id", "location_id"),
        Index("ix_inventory_items_tenant_category", "tenant_id", "category"),
    )
