"""User profile model."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Roles stored on profiles.role; they gate dashboard access."""
    USER = "user"
    AGENT = "agent"
    ADMIN = "admin"


class UserProfile(BaseModel):
    """Row of the profiles table; id equals the auth user id."""
    id: str = Field(..., description="Auth user ID")
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole = Field(default=UserRole.USER)
    created_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def can_manage_listings(self) -> bool:
        return self.role in (UserRole.AGENT, UserRole.ADMIN)
