"""Public agent page: agent profile and published listings."""

from api._handler import JsonHandler
from src.models.property import PropertyType
from src.services.identity import get_agent_by_id
from src.services.listing_resolver import get_agent_public_listings
from src.utils.errors import InvalidRequestError


class handler(JsonHandler):
    """GET /api/agents?id=&property_type="""

    async def get(self, gateway):
        agent_id = self.require_query_value("id")
        raw_type = self.query_value("property_type")
        property_type = None
        if raw_type:
            try:
                property_type = PropertyType(raw_type)
            except ValueError as e:
                raise InvalidRequestError(f"Unknown property type: {raw_type}") from e

        agent = await get_agent_by_id(gateway, agent_id)
        listings = await get_agent_public_listings(gateway, agent_id, property_type)

        payload = {
            "agent": agent.model_dump(mode="json"),
            "display_name": agent.display_name,
            "properties": [p.model_dump(mode="json") for p in listings.rows_or_empty()],
        }
        if not listings.ok:
            payload["error"] = listings.error.model_dump()
        return 200, payload
