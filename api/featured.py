"""Home page data: featured listings and the cities offered in the search box."""

from api._handler import JsonHandler
from src.services.listing_resolver import get_featured_properties, get_listing_cities


class handler(JsonHandler):
    """GET /api/featured"""

    async def get(self, gateway):
        featured = await get_featured_properties(gateway)
        cities = await get_listing_cities(gateway)

        payload = {
            "properties": [p.model_dump(mode="json") for p in featured.rows_or_empty()],
            "cities": cities.rows_or_empty(),
        }
        errors = [r.error.model_dump() for r in (featured, cities) if not r.ok]
        if errors:
            payload["errors"] = errors
        return 200, payload
