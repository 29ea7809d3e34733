"""Property (listing) models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from src.models.agent import Agent


class PropertyType(str, Enum):
    """Kinds of property that can be listed."""
    APARTMENT = "apartment"
    VILLA = "villa"
    TOWNHOUSE = "townhouse"
    LAND = "land"
    COMMERCIAL = "commercial"


class ListingType(str, Enum):
    """Listing type values."""
    BUY = "buy"
    RENT = "rent"


class PropertyStatus(str, Enum):
    """Lifecycle status of a property row. Only PUBLISHED is visible on listing pages."""
    DRAFT = "draft"
    PUBLISHED = "published"
    SOLD = "sold"
    RENTED = "rented"
    ARCHIVED = "archived"


class Property(BaseModel):
    """Property row as stored in the properties table."""
    id: str = Field(..., description="Property ID (uuid)")
    title: str = Field(..., description="Listing title")
    description: Optional[str] = Field(None, description="Free text description")
    property_type: PropertyType = Field(..., description="apartment, villa, townhouse, land or commercial")
    listing_type: ListingType = Field(..., description="buy or rent")
    price: float = Field(..., description="Asking price or monthly rent")
    bed: Optional[int] = Field(None, description="Bedrooms")
    bath: Optional[int] = Field(None, description="Bathrooms")
    area: Optional[float] = Field(None, description="Area in sqft")
    location: Optional[str] = Field(None, description="Street address")
    city: Optional[str] = Field(None, description="City")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    images: Optional[list[str]] = Field(None, description="Ordered public image URLs")
    status: PropertyStatus = Field(default=PropertyStatus.DRAFT, description="Listing status")
    agent_id: Optional[str] = Field(None, description="Owning agent (null for company-owned listings)")
    views: Optional[int] = Field(default=0, description="Detail page view counter")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    agents: Optional[Agent] = Field(None, description="Joined agent row, when selected")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def _check_coordinates(latitude: Optional[float], longitude: Optional[float]) -> None:
    if (latitude is None) != (longitude is None):
        raise ValueError("latitude and longitude must both be set or both be empty")
    if latitude is not None and not -90 <= latitude <= 90:
        raise ValueError("latitude must be between -90 and 90")
    if longitude is not None and not -180 <= longitude <= 180:
        raise ValueError("longitude must be between -180 and 180")


class PropertyCreate(BaseModel):
    """Validated input for a new listing."""
    title: str = Field(..., min_length=1, description="Listing title")
    description: Optional[str] = None
    property_type: PropertyType = PropertyType.APARTMENT
    listing_type: ListingType = ListingType.BUY
    price: float = Field(..., gt=0)
    bed: Optional[int] = Field(None, ge=0)
    bath: Optional[int] = Field(None, ge=0)
    area: Optional[float] = Field(None, gt=0)
    location: str = Field(default="")
    city: str = Field(default="")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    images: Optional[list[str]] = None
    status: PropertyStatus = PropertyStatus.DRAFT
    agent_id: Optional[str] = Field(None, description="Only honoured for admin-created listings")

    @model_validator(mode="after")
    def _coordinates_paired(self) -> "PropertyCreate":
        _check_coordinates(self.latitude, self.longitude)
        return self

    def to_row(self, agent_id: Optional[str]) -> dict:
        """Insert payload for the properties table."""
        row = self.model_dump(mode="json", exclude={"agent_id"})
        row["images"] = self.images or None
        row["agent_id"] = agent_id
        return row


class PropertyUpdate(BaseModel):
    """Partial edit of a listing; unset fields are left untouched."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    property_type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    price: Optional[float] = Field(None, gt=0)
    bed: Optional[int] = Field(None, ge=0)
    bath: Optional[int] = Field(None, ge=0)
    area: Optional[float] = Field(None, gt=0)
    location: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    images: Optional[list[str]] = None
    status: Optional[PropertyStatus] = None
    agent_id: Optional[str] = None

    @field_validator("title", "property_type", "listing_type", "price", "status")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("cannot be null")
        return value

    @model_validator(mode="after")
    def _coordinates_paired(self) -> "PropertyUpdate":
        edited = {"latitude", "longitude"} & self.model_fields_set
        if len(edited) == 1:
            raise ValueError("latitude and longitude must be edited together")
        if edited:
            _check_coordinates(self.latitude, self.longitude)
        return self

    def to_row(self) -> dict:
        """Update payload containing only the fields the caller set."""
        return self.model_dump(mode="json", exclude_unset=True)
