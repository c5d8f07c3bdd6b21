"""
Database Schemas for StayVista

Each model below maps to a MongoDB collection:
- User -> "users"
- Room -> "rooms"
- Booking -> "bookings"

Documents are loosely typed: fields not declared here are kept as sent
by the client and stored alongside the declared ones.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["guest", "host", "admin"]

REQUESTED = "Requested"


class Document(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class HostInfo(Document):
    email: str = Field(..., description="Host email address")
    name: Optional[str] = None
    image: Optional[str] = None


class GuestInfo(Document):
    email: str = Field(..., description="Guest email address")
    name: Optional[str] = None
    image: Optional[str] = None


class User(Document):
    email: str = Field(..., description="Email address, natural key across collections")
    name: Optional[str] = None
    image: Optional[str] = None
    role: Optional[Role] = Field(None, description="guest | host | admin")
    status: Optional[str] = Field(None, description="Verified, or Requested while a host request is pending")


class UserUpdate(Document):
    role: Optional[Role] = None
    status: Optional[str] = None


class Room(Document):
    title: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    guests: Optional[int] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    image: Optional[str] = None
    from_date: Optional[Any] = Field(None, alias="from")
    to_date: Optional[Any] = Field(None, alias="to")
    host: Optional[HostInfo] = None
    booked: bool = False


class RoomUpdate(Document):
    title: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    guests: Optional[int] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    image: Optional[str] = None
    from_date: Optional[Any] = Field(None, alias="from")
    to_date: Optional[Any] = Field(None, alias="to")
    booked: Optional[bool] = None


class RoomStatus(BaseModel):
    status: bool


class Booking(Document):
    roomId: Optional[str] = None
    guest: GuestInfo
    host: Optional[HostInfo] = None
    date: Optional[str] = Field(None, description="ISO date the booking was paid")
    price: Optional[float] = Field(None, ge=0)
    transactionId: Optional[str] = None
