"""Agent model - listing-manager identity linked one-to-one with a user account."""

from typing import Optional
from pydantic import BaseModel, Field


class ProfileSummary(BaseModel):
    """Subset of the profiles row joined onto agents (profiles:user_id)."""
    full_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


class Agent(BaseModel):
    """Agent row. user_id is unique across the table."""
    id: str = Field(..., description="Agent ID (uuid)")
    user_id: Optional[str] = Field(None, description="Auth user ID (unique)")
    company_name: Optional[str] = Field(None, description="Agency / company display name")
    bio: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: Optional[str] = None
    profiles: Optional[ProfileSummary] = Field(None, description="Joined profile, when selected")

    @property
    def display_name(self) -> str:
        if self.company_name:
            return self.company_name
        if self.profiles and self.profiles.full_name:
            return self.profiles.full_name
        return "Agent"
