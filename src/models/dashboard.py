"""Dashboard payload models."""

from typing import Optional
from pydantic import BaseModel, Field

from src.models.agent import Agent
from src.models.company import RealEstateCompany
from src.models.favorite import Favorite, RecentlyViewed
from src.models.profile import UserProfile
from src.models.property import Property, PropertyStatus
from src.models.saved_search import SavedSearch


class AdminStats(BaseModel):
    total_properties: int = 0
    published_properties: int = 0
    total_users: int = 0
    total_agents: int = 0


class AdminDashboard(BaseModel):
    properties: list[Property] = Field(default_factory=list)
    users: list[UserProfile] = Field(default_factory=list)
    agents: list[Agent] = Field(default_factory=list)
    companies: list[RealEstateCompany] = Field(default_factory=list)
    stats: AdminStats = Field(default_factory=AdminStats)
    errors: list[str] = Field(default_factory=list, description="Sections that failed to load")


class AgentStats(BaseModel):
    total: int = 0
    published: int = 0
    draft: int = 0
    views: int = 0

    @classmethod
    def from_listings(cls, listings: list[Property]) -> "AgentStats":
        return cls(
            total=len(listings),
            published=sum(1 for p in listings if p.status == PropertyStatus.PUBLISHED),
            draft=sum(1 for p in listings if p.status == PropertyStatus.DRAFT),
            views=sum(p.views or 0 for p in listings),
        )


class AgentDashboard(BaseModel):
    agent_id: Optional[str] = None
    is_real_estate_company: bool = False
    agent: Optional[Agent] = None
    listings: list[Property] = Field(default_factory=list)
    stats: AgentStats = Field(default_factory=AgentStats)


class UserDashboard(BaseModel):
    saved_searches: list[SavedSearch] = Field(default_factory=list)
    recently_viewed: list[RecentlyViewed] = Field(default_factory=list)
    favorites: list[Favorite] = Field(default_factory=list)
