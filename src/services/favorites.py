"""Favorites - (user_id, property_id) membership toggling."""

from typing import Optional

from src.models.favorite import Favorite, FavoriteToggle
from src.models.result import Result
from src.services.supabase_client import SupabaseGateway, all_rows, first_row, is_unique_violation
from src.utils.errors import SupabaseError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

FAVORITES_TABLE = "favorites"


async def is_favorite(gateway: SupabaseGateway, user_id: str, property_id: str) -> bool:
    try:
        result = (
            gateway.table(FAVORITES_TABLE)
            .select("id")
            .eq("user_id", user_id)
            .eq("property_id", property_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise SupabaseError(f"Failed to check favorite: {e}") from e
    return first_row(result) is not None


async def toggle_favorite(gateway: SupabaseGateway, user_id: str, property_id: str) -> FavoriteToggle:
    """
    Remove the pair if present, otherwise add it.

    A duplicate-key error on insert means a concurrent submit already added
    it, which is reported as ADDED.
    """
    if await is_favorite(gateway, user_id, property_id):
        try:
            (
                gateway.table(FAVORITES_TABLE)
                .delete()
                .eq("user_id", user_id)
                .eq("property_id", property_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to remove favorite: {e}") from e
        logger.info("Favorite removed", user_id=mask_user_id(user_id), property_id=property_id)
        return FavoriteToggle.REMOVED

    try:
        gateway.table(FAVORITES_TABLE).insert({"user_id": user_id, "property_id": property_id}).execute()
    except Exception as e:
        if not is_unique_violation(e):
            raise SupabaseError(f"Failed to add favorite: {e}") from e
        logger.info("Favorite already present", user_id=mask_user_id(user_id), property_id=property_id)
        return FavoriteToggle.ADDED

    logger.info("Favorite added", user_id=mask_user_id(user_id), property_id=property_id)
    return FavoriteToggle.ADDED


async def list_favorites(gateway: SupabaseGateway, user_id: str, limit: Optional[int] = None) -> Result[list[Favorite]]:
    """Favorites with their joined property, newest first."""
    try:
        query = (
            gateway.table(FAVORITES_TABLE)
            .select("*, properties (*)")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
        )
        if limit:
            query = query.limit(limit)
        result = query.execute()
        return Result.success([Favorite.model_validate(row) for row in all_rows(result)])
    except Exception as e:
        logger.error("Favorites query failed", user_id=mask_user_id(user_id), error=str(e))
        return Result.failure("list_favorites", str(e), table=FAVORITES_TABLE)


async def remove_favorite(gateway: SupabaseGateway, user_id: str, favorite_id: str) -> None:
    """Delete one favorite by id (favorites page), scoped to its owner."""
    try:
        gateway.table(FAVORITES_TABLE).delete().eq("id", favorite_id).eq("user_id", user_id).execute()
    except Exception as e:
        raise SupabaseError(f"Failed to remove favorite: {e}") from e
