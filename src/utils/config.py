"""Runtime configuration read from environment variables."""

import os
from typing import Mapping, Optional
from pydantic import BaseModel, Field

from src.utils.errors import SupabaseError


class MarketplaceConfig(BaseModel):
    """Settings needed to build a per-request Supabase gateway."""
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_key: str = Field(..., description="Service role key (server side only)")
    property_images_bucket: str = Field(default="property-images", description="Storage bucket for listing images")
    image_cache_control: int = Field(default=3600, ge=0, description="Cache-Control max-age for uploaded images")
    featured_limit: int = Field(default=6, ge=1, description="Number of featured listings on the home page")
    recently_viewed_limit: int = Field(default=10, ge=1, description="Recently viewed rows on the user dashboard")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MarketplaceConfig":
        """Build config from the environment; raises SupabaseError if credentials are missing."""
        env = os.environ if environ is None else environ

        url = env.get("SUPABASE_URL", "").strip()
        key = env.get("SUPABASE_SERVICE_ROLE_KEY", "").strip()
        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        return cls(
            supabase_url=url,
            supabase_key=key,
            property_images_bucket=env.get("PROPERTY_IMAGES_BUCKET", "property-images"),
            image_cache_control=int(env.get("IMAGE_CACHE_CONTROL", "3600")),
            featured_limit=int(env.get("FEATURED_LIMIT", "6")),
            recently_viewed_limit=int(env.get("RECENTLY_VIEWED_LIMIT", "10")),
        )
