from pydantic import BaseModel, EmailStr, field_validator, model_validator
from datetime import datetime
from enum import Enum
from typing import Optional

from utils import is_iso_date


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# Statuses that block the vehicle for their date range
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.APPROVED)


class BookingModel(BaseModel):
    id: str
    vehicle_id: str
    vehicle_name: Optional[str] = None
    start_date: str
    end_date: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    phone_number: Optional[str] = None
    pickup_location: Optional[str] = None
    dropoff_location: Optional[str] = None
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    admin_note: Optional[str] = None
    total_price: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    class Config:
        json_schema_extra = {
            "example": {
                "id": "mock-1",
                "vehicle_id": "deepol-s05",
                "vehicle_name": "Deepol S05",
                "start_date": "2026-06-15",
                "end_date": "2026-06-20",
                "customer_name": "John Doe",
                "customer_email": "john@example.com",
                "phone_number": "+94 77 123 4567",
                "pickup_location": "Colombo",
                "dropoff_location": "Kandy",
                "notes": "Looking for a reliable car.",
                "status": "PENDING",
                "total_price": 225.0
            }
        }


class BookingRequest(BaseModel):
    """What the booking form submits. Status and timestamps are set by the store."""
    vehicle_id: str
    vehicle_name: str = "Unknown"
    start_date: str
    end_date: str
    customer_name: str
    customer_email: EmailStr
    phone_number: str
    pickup_location: str
    dropoff_location: str
    notes: Optional[str] = None
    total_price: float = 0

    @field_validator('start_date', 'end_date')
    def date_must_be_iso(cls, v):
        if not is_iso_date(v):
            raise ValueError('Date must use the YYYY-MM-DD format')
        return v

    @model_validator(mode='after')
    def end_not_before_start(self):
        if self.start_date > self.end_date:
            raise ValueError('Drop-off date must be the same as or after pick-up date.')
        return self
