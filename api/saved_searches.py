"""Saved searches endpoint."""

from api._handler import JsonHandler
from src.models.filters import FilterSpec
from src.models.property import ListingType
from src.services.auth import require_auth
from src.services.saved_searches import (
    delete_saved_search,
    list_saved_searches,
    save_search,
    saved_search_location,
)
from src.utils.errors import InvalidRequestError


class handler(JsonHandler):
    """
    GET    list with the listing URL each search re-runs
    POST   {"name", "listing_type", "filters": {...query params}}
    DELETE ?id=
    """

    async def get(self, gateway):
        user = await require_auth(gateway, self.access_token())
        result = await list_saved_searches(gateway, user.id)
        payload = {
            "saved_searches": [
                {**search.model_dump(mode="json"), "location": saved_search_location(search)}
                for search in result.rows_or_empty()
            ]
        }
        if not result.ok:
            payload["error"] = result.error.model_dump()
        return 200, payload

    async def post(self, gateway):
        user = await require_auth(gateway, self.access_token())
        body = self.json_body()

        raw_type = body.get("listing_type") or ListingType.BUY.value
        try:
            listing_type = ListingType(raw_type)
        except ValueError as e:
            raise InvalidRequestError(f"Unknown listing type: {raw_type}") from e

        filters = FilterSpec.from_query_params(body.get("filters") or {})
        search = await save_search(gateway, user.id, body.get("name") or "", listing_type, filters)
        return 201, {
            "saved_search": search.model_dump(mode="json"),
            "location": saved_search_location(search),
        }

    async def delete(self, gateway):
        user = await require_auth(gateway, self.access_token())
        search_id = self.require_query_value("id")
        await delete_saved_search(gateway, user.id, search_id)
        return 200, {"deleted": search_id}
