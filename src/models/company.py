"""Real estate company models."""

from typing import Optional
from pydantic import BaseModel, Field


class RealEstateCompany(BaseModel):
    """Organizational account; may or may not have a matching agents row yet."""
    id: str = Field(..., description="Company ID (uuid)")
    user_id: Optional[str] = Field(None, description="Auth user ID (unique)")
    company_name: str = Field(..., description="Company name")
    contact_person_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[str] = None


class CompanyForm(BaseModel):
    """Admin form for creating or editing a company account."""
    email: str = Field(..., min_length=3)
    password: Optional[str] = Field(None, min_length=8, description="Required when creating")
    company_name: str = Field(..., min_length=1)
    contact_person_name: str = Field(..., min_length=1)
    phone_number: Optional[str] = None


class CompanyCreation(BaseModel):
    """Outcome of the multi-step company creation."""
    company: RealEstateCompany
    agent_id: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)
