"""View counter and recently-viewed tracking for property detail pages."""

from datetime import datetime, timezone
from typing import Optional

from src.models.favorite import RecentlyViewed
from src.models.result import Result
from src.services.supabase_client import SupabaseGateway, all_rows
from src.utils.errors import SupabaseError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

RECENTLY_VIEWED_TABLE = "recently_viewed"
INCREMENT_VIEWS_RPC = "increment_property_views"


async def track_view(gateway: SupabaseGateway, property_id: str, user_id: Optional[str]) -> bool:
    """
    Record an authenticated detail-page visit.

    Upserts recently_viewed on (user_id, property_id) with the current time and
    bumps properties.views through the increment_property_views function, which
    updates in a single statement. Anonymous visits are not tracked.
    """
    if not user_id:
        return False

    viewed_at = datetime.now(timezone.utc).isoformat()
    try:
        (
            gateway.table(RECENTLY_VIEWED_TABLE)
            .upsert(
                {"user_id": user_id, "property_id": property_id, "viewed_at": viewed_at},
                on_conflict="user_id,property_id",
            )
            .execute()
        )
        gateway.rpc(INCREMENT_VIEWS_RPC, {"property_id": property_id}).execute()
    except Exception as e:
        logger.error(
            "Failed to track property view",
            user_id=mask_user_id(user_id),
            property_id=property_id,
            error=str(e)
        )
        raise SupabaseError(f"Failed to track view: {e}") from e

    logger.debug("Tracked property view", user_id=mask_user_id(user_id), property_id=property_id)
    return True


async def get_recently_viewed(
    gateway: SupabaseGateway,
    user_id: str,
    limit: Optional[int] = None,
) -> Result[list[RecentlyViewed]]:
    limit = limit or gateway.config.recently_viewed_limit
    try:
        result = (
            gateway.table(RECENTLY_VIEWED_TABLE)
            .select("*, properties (*)")
            .eq("user_id", user_id)
            .order("viewed_at", desc=True)
            .limit(limit)
            .execute()
        )
        return Result.success([RecentlyViewed.model_validate(row) for row in all_rows(result)])
    except Exception as e:
        logger.error("Recently viewed query failed", user_id=mask_user_id(user_id), error=str(e))
        return Result.failure("get_recently_viewed", str(e), table=RECENTLY_VIEWED_TABLE)
