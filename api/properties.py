"""Property detail and management endpoint."""

from api._handler import JsonHandler, decode_images
from src.models.property import PropertyCreate, PropertyStatus, PropertyUpdate
from src.services.auth import get_current_user, require_auth
from src.services.favorites import is_favorite
from src.services.properties import (
    create_property,
    delete_property,
    get_property_detail,
    update_property,
    update_property_status,
)
from src.services.view_tracker import track_view
from src.utils.errors import InvalidRequestError, SupabaseError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class handler(JsonHandler):
    """
    GET    /api/properties?id=   detail page (records the view for signed-in users)
    POST   /api/properties       create (agent or admin)
    PATCH  /api/properties?id=   edit, or change status with {"status": ...} only
    DELETE /api/properties?id=   delete with images
    """

    async def get(self, gateway):
        property_id = self.require_query_value("id")
        prop = await get_property_detail(gateway, property_id)

        user = await get_current_user(gateway, self.access_token())
        favorited = False
        if user is not None:
            try:
                await track_view(gateway, property_id, user.id)
            except SupabaseError as e:
                # A failed view record never blocks the detail page
                logger.warning("View tracking failed", property_id=property_id, error=str(e))
            favorited = await is_favorite(gateway, user.id, property_id)

        return 200, {
            "property": prop.model_dump(mode="json"),
            "is_favorite": favorited,
        }

    async def post(self, gateway):
        profile = await require_auth(gateway, self.access_token())
        body = dict(self.json_body())
        images = decode_images(body.pop("image_files", None))
        payload = PropertyCreate.model_validate(body)

        created = await create_property(gateway, profile, payload, images=images)
        return 201, {"property": created.model_dump(mode="json")}

    async def patch(self, gateway):
        profile = await require_auth(gateway, self.access_token())
        property_id = self.require_query_value("id")
        body = dict(self.json_body())
        images = decode_images(body.pop("image_files", None))

        if set(body) == {"status"} and not images:
            try:
                status = PropertyStatus(body["status"])
            except ValueError as e:
                raise InvalidRequestError(f"Unknown status: {body['status']}") from e
            updated = await update_property_status(gateway, profile, property_id, status)
        else:
            payload = PropertyUpdate.model_validate(body)
            updated = await update_property(gateway, profile, property_id, payload, new_images=images)

        return 200, {"property": updated.model_dump(mode="json")}

    async def delete(self, gateway):
        profile = await require_auth(gateway, self.access_token())
        property_id = self.require_query_value("id")
        await delete_property(gateway, profile, property_id)
        return 200, {"deleted": property_id}
