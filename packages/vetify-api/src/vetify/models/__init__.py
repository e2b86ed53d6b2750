"""SQLAlchemy ORM models."""

from vetify.models.base import Base
from vetify.models.tenant import Tenant
from vetify.models.location import Location
from vetify.models.customer import Customer
from vetify.models.pet import Pet
from vetify.models.appointment import Appointment
from vetify.models.inventory_item import InventoryItem
from vetify.models.sale import Sale, SaleItem
from vetify.models.api_key import ApiKey

__all__ = [
    "Base",
    "Tenant",
    "Location",
    "Customer",
    "Pet",
    "Appointment",
    "InventoryItem",
    "Sale",
    "SaleItem",
    "ApiKey",
]
