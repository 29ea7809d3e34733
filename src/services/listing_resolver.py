"""Listing query resolver - filter specification to published, ordered properties."""

from typing import Optional

from src.models.filters import FilterSpec
from src.models.property import ListingType, Property, PropertyStatus, PropertyType
from src.models.result import Result
from src.services.supabase_client import SupabaseGateway, all_rows
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

PROPERTIES_TABLE = "properties"


def apply_filters(query, filters: FilterSpec):
    """AND every set constraint of the filter specification onto a properties query."""
    if filters.city:
        query = query.eq("city", filters.city)
    if filters.min_price is not None:
        query = query.gte("price", filters.min_price)
    if filters.max_price is not None:
        query = query.lte("price", filters.max_price)
    if filters.property_type:
        query = query.in_("property_type", [t.value for t in filters.property_type])
    if filters.min_bed is not None:
        query = query.gte("bed", filters.min_bed)
    if filters.max_bed is not None:
        query = query.lte("bed", filters.max_bed)
    if filters.min_bath is not None:
        query = query.gte("bath", filters.min_bath)
    if filters.max_bath is not None:
        query = query.lte("bath", filters.max_bath)
    if filters.min_area is not None:
        query = query.gte("area", filters.min_area)
    if filters.max_area is not None:
        query = query.lte("area", filters.max_area)
    return query


def newest_first(query):
    """Most recent first; id breaks created_at ties so results are deterministic."""
    return query.order("created_at", desc=True).order("id")


def _to_properties(rows: list[dict]) -> list[Property]:
    return [Property.model_validate(row) for row in rows]


async def resolve_listings(
    gateway: SupabaseGateway,
    listing_type: ListingType,
    filters: Optional[FilterSpec] = None,
) -> Result[list[Property]]:
    """
    Published properties of one listing type matching the filters.

    Store failures come back as a failed Result, never as an empty list.
    """
    filters = filters or FilterSpec()
    listing_type = ListingType(listing_type)

    try:
        with log_timing("resolve_listings", logger=logger, listing_type=listing_type.value):
            query = (
                gateway.table(PROPERTIES_TABLE)
                .select("*")
                .eq("status", PropertyStatus.PUBLISHED.value)
                .eq("listing_type", listing_type.value)
            )
            query = newest_first(apply_filters(query, filters))
            result = query.execute()
        properties = _to_properties(all_rows(result))
    except Exception as e:
        logger.error(
            "Listing query failed",
            listing_type=listing_type.value,
            filters=filters.to_query_params(),
            error=str(e)
        )
        return Result.failure("resolve_listings", str(e), table=PROPERTIES_TABLE)

    logger.info(
        "Resolved listings",
        listing_type=listing_type.value,
        filters=filters.to_query_params(),
        result_count=len(properties)
    )
    return Result.success(properties)


async def get_featured_properties(gateway: SupabaseGateway, limit: Optional[int] = None) -> Result[list[Property]]:
    """Home page subset: newest published buy/rent listings."""
    limit = limit or gateway.config.featured_limit
    try:
        result = newest_first(
            gateway.table(PROPERTIES_TABLE)
            .select("*")
            .eq("status", PropertyStatus.PUBLISHED.value)
            .in_("listing_type", [ListingType.BUY.value, ListingType.RENT.value])
        ).limit(limit).execute()
        return Result.success(_to_properties(all_rows(result)))
    except Exception as e:
        logger.error("Featured listings query failed", error=str(e))
        return Result.failure("get_featured_properties", str(e), table=PROPERTIES_TABLE)


async def get_listing_cities(gateway: SupabaseGateway) -> Result[list[str]]:
    """Sorted distinct cities that have at least one published listing."""
    try:
        result = (
            gateway.table(PROPERTIES_TABLE)
            .select("city")
            .eq("status", PropertyStatus.PUBLISHED.value)
            .execute()
        )
    except Exception as e:
        logger.error("City list query failed", error=str(e))
        return Result.failure("get_listing_cities", str(e), table=PROPERTIES_TABLE)

    cities = {row.get("city") for row in all_rows(result) if row.get("city")}
    return Result.success(sorted(cities))


async def get_agent_public_listings(
    gateway: SupabaseGateway,
    agent_id: str,
    property_type: Optional[PropertyType] = None,
) -> Result[list[Property]]:
    """Published listings shown on an agent's public page."""
    try:
        query = (
            gateway.table(PROPERTIES_TABLE)
            .select("*")
            .eq("agent_id", agent_id)
            .eq("status", PropertyStatus.PUBLISHED.value)
        )
        if property_type:
            query = query.eq("property_type", PropertyType(property_type).value)
        result = newest_first(query).execute()
        return Result.success(_to_properties(all_rows(result)))
    except Exception as e:
        logger.error("Agent listings query failed", agent_id=agent_id, error=str(e))
        return Result.failure("get_agent_public_listings", str(e), table=PROPERTIES_TABLE)
