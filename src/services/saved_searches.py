"""Saved searches - store filter snapshots and turn them back into live queries."""

from src.models.filters import FilterSpec
from src.models.property import ListingType
from src.models.result import Result
from src.models.saved_search import SavedSearch
from src.services.supabase_client import SupabaseGateway, all_rows, first_row
from src.utils.errors import InvalidRequestError, SupabaseError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

SAVED_SEARCHES_TABLE = "saved_searches"


async def save_search(
    gateway: SupabaseGateway,
    user_id: str,
    search_name: str,
    listing_type: ListingType,
    filters: FilterSpec,
) -> SavedSearch:
    if not search_name or not search_name.strip():
        raise InvalidRequestError("Saved search name is required")

    row = {
        "user_id": user_id,
        "name": search_name.strip(),
        "listing_type": ListingType(listing_type).value,
        **SavedSearch.snapshot(filters),
    }

    try:
        result = gateway.table(SAVED_SEARCHES_TABLE).insert(row).execute()
    except Exception as e:
        raise SupabaseError(f"Failed to save search: {e}") from e

    created = first_row(result)
    if not created:
        raise SupabaseError("Failed to save search: no data returned")

    logger.info(
        "Saved search created",
        user_id=mask_user_id(user_id),
        search_id=created.get("id"),
        listing_type=row["listing_type"]
    )
    return SavedSearch.model_validate(created)


async def list_saved_searches(gateway: SupabaseGateway, user_id: str) -> Result[list[SavedSearch]]:
    try:
        result = (
            gateway.table(SAVED_SEARCHES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return Result.success([SavedSearch.model_validate(row) for row in all_rows(result)])
    except Exception as e:
        logger.error("Saved searches query failed", user_id=mask_user_id(user_id), error=str(e))
        return Result.failure("list_saved_searches", str(e), table=SAVED_SEARCHES_TABLE)


async def delete_saved_search(gateway: SupabaseGateway, user_id: str, search_id: str) -> None:
    try:
        gateway.table(SAVED_SEARCHES_TABLE).delete().eq("id", search_id).eq("user_id", user_id).execute()
    except Exception as e:
        raise SupabaseError(f"Failed to delete saved search: {e}") from e
    logger.info("Saved search deleted", user_id=mask_user_id(user_id), search_id=search_id)


def saved_search_location(search: SavedSearch) -> str:
    """Listing page URL that re-runs the search against live data."""
    query = search.to_filter_spec().to_query_string()
    return f"/{search.effective_listing_type.value}?{query}"
