"""Favorites endpoint for signed-in users."""

from api._handler import JsonHandler
from src.services.auth import require_auth
from src.services.favorites import list_favorites, remove_favorite, toggle_favorite
from src.utils.errors import InvalidRequestError


class handler(JsonHandler):
    """GET lists, POST {"property_id"} toggles, DELETE ?id= removes by favorite id."""

    async def get(self, gateway):
        user = await require_auth(gateway, self.access_token())
        result = await list_favorites(gateway, user.id)
        payload = {"favorites": [f.model_dump(mode="json") for f in result.rows_or_empty()]}
        if not result.ok:
            payload["error"] = result.error.model_dump()
        return 200, payload

    async def post(self, gateway):
        user = await require_auth(gateway, self.access_token())
        property_id = self.json_body().get("property_id")
        if not property_id:
            raise InvalidRequestError("property_id is required")

        outcome = await toggle_favorite(gateway, user.id, property_id)
        return 200, {"property_id": property_id, "result": outcome.value}

    async def delete(self, gateway):
        user = await require_auth(gateway, self.access_token())
        favorite_id = self.require_query_value("id")
        await remove_favorite(gateway, user.id, favorite_id)
        return 200, {"deleted": favorite_id}
