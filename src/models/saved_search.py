"""Saved search model - a named snapshot of listing filters."""

from typing import Optional
from pydantic import BaseModel, Field

from src.models.filters import FilterSpec
from src.models.property import ListingType, PropertyType


class SavedSearch(BaseModel):
    """Row of saved_searches. Rows are never edited, only deleted."""
    id: str = Field(..., description="Saved search ID (uuid)")
    user_id: str = Field(..., description="Owner auth user ID")
    name: str = Field(..., description="User supplied label")
    listing_type: Optional[ListingType] = Field(None, description="buy or rent; buy when missing")
    city: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    property_type: Optional[list[PropertyType]] = None
    min_bed: Optional[int] = None
    max_bed: Optional[int] = None
    min_bath: Optional[int] = None
    max_bath: Optional[int] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    created_at: Optional[str] = None

    @property
    def effective_listing_type(self) -> ListingType:
        return self.listing_type or ListingType.BUY

    def to_filter_spec(self) -> FilterSpec:
        """Filters to re-run against live data."""
        return FilterSpec(
            city=self.city,
            min_price=self.min_price,
            max_price=self.max_price,
            property_type=self.property_type or None,
            min_bed=self.min_bed,
            max_bed=self.max_bed,
            min_bath=self.min_bath,
            max_bath=self.max_bath,
            min_area=self.min_area,
            max_area=self.max_area,
        )

    @staticmethod
    def snapshot(filters: FilterSpec) -> dict:
        """Column values stored for a filter specification."""
        return filters.model_dump(mode="json")
