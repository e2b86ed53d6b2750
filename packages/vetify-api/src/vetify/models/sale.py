"""Sale models - completed point-of-sale transactions, read by the sales report."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vetify.models.base import Base, id_column, utcnow


class Sale(Base):
    __tablename__ = "sales"

    id: Mapped[str] = id_column()
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    location_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    customer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
    )
    total: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="COMPLETED")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    items: Mapped[list["SaleItem"]] = relationship(
        back_populates="sale", cascade="all, delete-orphan", lazy="selectin"
    )

    __table_args__ = (Index("ix_sales_tenant_created", "tenant_id", "created_at"),)


class SaleItem(Base):
    __tablename__ = "sale_items"

    id: Mapped[str] = id_column()
    sale_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True
    )
    inventory_item_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("inventory_items.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    # Inventory category for products, service category for services.
    category: Mapped[str] = mapped_column(String(32), nullable=False, default="OTHER")
    quantity: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False, default=1
    )
    total: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)

    sale: Mapped[Sale] = relationship(back_populates="items")
