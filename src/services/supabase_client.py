"""Supabase gateway: one explicitly constructed client handle per request."""

from typing import Any, Optional
from postgrest.exceptions import APIError
from supabase import create_client, Client
from supabase.client import ClientOptions

from src.utils.config import MarketplaceConfig
from src.utils.logging import get_structured_logger, mask_sensitive_data

logger = get_structured_logger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseGateway:
    """Row, RPC, storage and auth access for a single request.

    Services take the gateway as their first argument instead of reaching for
    a module-level client.
    """

    def __init__(self, client: Client, config: MarketplaceConfig):
        self.client = client
        self.config = config

    def table(self, name: str):
        """Query builder for a table (properties, agents, favorites, ...)."""
        return self.client.table(name)

    def rpc(self, function: str, params: Optional[dict] = None):
        return self.client.rpc(function, params or {})

    @property
    def auth(self):
        return self.client.auth

    def images_bucket(self):
        """Storage bucket holding listing images and company logos."""
        return self.client.storage.from_(self.config.property_images_bucket)

    async def __aenter__(self) -> "SupabaseGateway":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                error=mask_sensitive_data(str(exc_val)),
                error_type=exc_type.__name__
            )
        return False


def create_gateway(config: Optional[MarketplaceConfig] = None) -> SupabaseGateway:
    """Build a gateway from config (environment by default)."""
    config = config or MarketplaceConfig.from_env()

    # Server-side service role client: no session persistence between requests
    options = ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
    )
    client = create_client(config.supabase_url, config.supabase_key, options)
    logger.debug("Supabase client created", supabase_url=config.supabase_url)
    return SupabaseGateway(client, config)


def is_unique_violation(error: BaseException) -> bool:
    """True for duplicate-key failures (the store's uniqueness arbiter)."""
    if isinstance(error, APIError) and error.code == UNIQUE_VIOLATION:
        return True
    return "duplicate key" in str(error).lower()


def first_row(result: Any) -> Optional[dict]:
    """First row of an executed query, or None."""
    data = getattr(result, "data", None)
    if isinstance(data, list):
        return data[0] if len(data) > 0 else None
    return data or None


def all_rows(result: Any) -> list[dict]:
    data = getattr(result, "data", None)
    if not data:
        return []
    return data if isinstance(data, list) else [data]
