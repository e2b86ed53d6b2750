"""Schemas for the public v1 resources.

Responses never include ``tenantId``: the tenant is implied by the API key.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from vetify.schemas.common import CamelModel

AppointmentStatus = Literal[
    "SCHEDULED",
    "CONFIRMED",
    "CHECKED_IN",
    "IN_PROGRESS",
    "COMPLETED",
    "CANCELLED_CLIENT",
    "CANCELLED_CLINIC",
    "NO_SHOW",
]


class LocationResponse(CamelModel):
    id: str
    name: str
    slug: str
    address: str | None
    phone: str | None
    email: str | None
    timezone: str
    is_active: bool
    is_primary: bool
    created_at: datetime
    updated_at: datetime


class CustomerResponse(CamelModel):
    id: str
    location_id: str | None
    name: str
    email: str | None
    phone: str | None
    address: str | None
    notes: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CustomerCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    address: str | None = None
    notes: str | None = None
    location_id: str | None = None


class PetResponse(CamelModel):
    id: str
    customer_id: str
    location_id: str | None
    name: str
    species: str
    breed: str
    date_of_birth: datetime
    gender: str
    weight: float | None
    weight_unit: str | None
    microchip_number: str | None
    is_neutered: bool
    is_deceased: bool
    created_at: datetime
    updated_at: datetime


class PetCreate(CamelModel):
    customer_id: str
    name: str = Field(min_length=1, max_length=100)
    species: str = Field(min_length=1, max_length=50)
    breed: str = Field(min_length=1, max_length=100)
    date_of_birth: datetime
    gender: str = Field(min_length=1, max_length=20)
    weight: float | None = Field(default=None, gt=0)
    weight_unit: str | None = Field(default=None, max_length=10)
    microchip_number: str | None = Field(default=None, max_length=64)
    is_neutered: bool = False
    location_id: str | None = None


class AppointmentResponse(CamelModel):
    id: str
    pet_id: str
    customer_id: str
    location_id: str | None
    date_time: datetime
    duration: int
    reason: str
    notes: str | None
    status: str
    created_at: datetime
    updated_at: datetime


class AppointmentCreate(CamelModel):
    pet_id: str
    date_time: datetime
    duration: int = Field(default=30, ge=15, le=480)
    reason: str = Field(min_length=1, max_length=500)
    notes: str | None = None
    status: AppointmentStatus = "SCHEDULED"
    location_id: str | None = None


class AppointmentUpdate(CamelModel):
    """Partial update. An explicit ``null`` clears ``notes`` or ``locationId``."""

    date_time: datetime | None = None
    duration: int | None = Field(default=None, ge=15, le=480)
    reason: str | None = Field(default=None, min_length=1, max_length=500)
    notes: str | None = Field(default=None, max_length=2000)
    status: AppointmentStatus | None = None
    location_id: str | None = None


InventoryCategory = Literal[
    "MEDICINE",
    "VACCINE",
    "DEWORMER",
    "FLEA_TICK_PREVENTION",
    "FOOD_PRESCRIPTION",
    "FOOD_REGULAR",
    "SUPPLEMENT",
    "ACCESSORY",
    "CONSUMABLE_CLINIC",
    "SURGICAL_MATERIAL",
    "LAB_SUPPLIES",
    "HYGIENE_GROOMING",
    "OTHER",
]

InventoryStatus = Literal[
    "ACTIVE", "INACTIVE", "LOW_STOCK", "OUT_OF_STOCK", "EXPIRED", "DISCONTINUED"
]


class InventoryItemResponse(CamelModel):
    id: str
    location_id: str | None
    name: str
    category: str
    description: str | None
    active_compound: str | None
    presentation: str | None
    measure: str | None
    brand: str | None
    quantity: float
    min_stock: float | None
    expiration_date: datetime | None
    status: str
    batch_number: str | None
    special_notes: str | None
    storage_location: str | None
    cost: float | None
    price: float | None
    created_at: datetime
    updated_at: datetime


class InventoryItemCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    category: InventoryCategory
    description: str | None = Field(default=None, max_length=1000)
    active_compound: str | None = Field(default=None, max_length=255)
    presentation: str | None = Field(default=None, max_length=100)
    measure: str | None = Field(default=None, max_length=50)
    brand: str | None = Field(default=None, max_length=100)
    quantity: float = Field(default=0, ge=0)
    min_stock: float | None = Field(default=None, ge=0)
    expiration_date: datetime | None = None
    status: InventoryStatus = "ACTIVE"
    batch_number: str | None = Field(default=None, max_length=100)
    special_notes: str | None = Field(default=None, max_length=500)
    storage_location: str | None = Field(default=None, max_length=100)
    cost: float | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)
    location_id: str | None = None


class InventoryItemUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: InventoryCategory | None = None
    description: str | None = Field(default=None, max_length=1000)
    active_compound: str | None = Field(default=None, max_length=255)
    presentation: str | None = Field(default=None, max_length=100)
    measure: str | None = Field(default=None, max_length=50)
    brand: str | None = Field(default=None, max_length=100)
    quantity: float | None = Field(default=None, ge=0)
    min_stock: float | None = Field(default=None, ge=0)
    expiration_date: datetime | None = None
    status: InventoryStatus | None = None
    batch_number: str | None = Field(default=None, max_length=100)
    special_notes: str | None = Field(default=None, max_length=500)
    storage_location: str | None = Field(default=None, max_length=100)
    cost: float | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)
    location_id: str | None = None
