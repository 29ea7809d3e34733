"""Agent identity resolution outcomes."""

from typing import Literal, Optional, Union
from pydantic import BaseModel, Field


class HasAgent(BaseModel):
    """User owns an agents row."""
    kind: Literal["has_agent"] = "has_agent"
    agent_id: str = Field(..., description="agents.id to attach listings to")
    provisioned: bool = Field(default=False, description="True when the row was created by this resolution")


class EligibleCompanyNoAgent(BaseModel):
    """User is a real estate company but no agents row could be provisioned."""
    kind: Literal["company_without_agent"] = "company_without_agent"
    company_id: str = Field(..., description="real_estate_companies.id")


class Ineligible(BaseModel):
    """Neither an agent nor a company."""
    kind: Literal["ineligible"] = "ineligible"


Identity = Union[HasAgent, EligibleCompanyNoAgent, Ineligible]


def listing_agent_id(identity: Identity) -> Optional[str]:
    """agent_id to store on a new property; None for company-owned listings."""
    if isinstance(identity, HasAgent):
        return identity.agent_id
    return None
