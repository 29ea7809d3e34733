"""Buy / rent listing pages: published properties matching URL filters."""

from api._handler import JsonHandler
from src.models.filters import FilterSpec
from src.models.property import ListingType
from src.services.listing_resolver import resolve_listings
from src.utils.errors import InvalidRequestError


class handler(JsonHandler):
    """GET /api/listings?listing_type=buy&city=...&min_price=..."""

    async def get(self, gateway):
        raw_type = self.query_value("listing_type") or ListingType.BUY.value
        try:
            listing_type = ListingType(raw_type)
        except ValueError as e:
            raise InvalidRequestError(f"Unknown listing type: {raw_type}") from e

        filters = FilterSpec.from_query_params(self.query)
        result = await resolve_listings(gateway, listing_type, filters)
        if not result.ok:
            # Page still renders; the error is reported next to the empty list
            return 200, {
                "listing_type": listing_type.value,
                "filters": filters.to_query_params(),
                "properties": [],
                "error": result.error.model_dump(),
            }

        return 200, {
            "listing_type": listing_type.value,
            "filters": filters.to_query_params(),
            "properties": [p.model_dump(mode="json") for p in result.value],
        }
