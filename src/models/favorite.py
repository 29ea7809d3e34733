"""Favorite and recently-viewed join models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from src.models.property import Property


class FavoriteToggle(str, Enum):
    """What a toggle did."""
    ADDED = "added"
    REMOVED = "removed"


class Favorite(BaseModel):
    """(user_id, property_id) pair, unique."""
    id: Optional[str] = None
    user_id: str
    property_id: str
    created_at: Optional[str] = None
    properties: Optional[Property] = Field(None, description="Joined property, when selected")


class RecentlyViewed(BaseModel):
    """Last time a user opened a property's detail page."""
    user_id: str
    property_id: str
    viewed_at: Optional[str] = None
    properties: Optional[Property] = Field(None, description="Joined property, when selected")
