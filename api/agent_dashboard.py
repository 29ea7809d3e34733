"""Agent dashboard endpoint: own listings, stats and company logo upload."""

from api._handler import JsonHandler, decode_images
from src.models.identity import HasAgent
from src.models.profile import UserRole
from src.services.auth import require_auth
from src.services.dashboards import get_agent_dashboard
from src.services.identity import resolve_agent_identity
from src.services.image_upload import upload_company_logo
from src.utils.errors import InvalidRequestError, ProfileSetupRequiredError


class handler(JsonHandler):
    """GET dashboard data; POST {"logo": {filename, content_type, data}} replaces the logo."""

    async def get(self, gateway):
        user = await require_auth(gateway, self.access_token(), required_role=UserRole.AGENT)
        dashboard = await get_agent_dashboard(gateway, user.id)
        return 200, dashboard.model_dump(mode="json")

    async def post(self, gateway):
        user = await require_auth(gateway, self.access_token(), required_role=UserRole.AGENT)
        logo = self.json_body().get("logo")
        if not logo:
            raise InvalidRequestError("logo is required")

        identity = await resolve_agent_identity(gateway, user.id)
        if not isinstance(identity, HasAgent):
            raise ProfileSetupRequiredError("Please complete your agent profile first.")

        image = decode_images([logo])[0]
        url = await upload_company_logo(gateway, image, identity.agent_id)
        return 200, {"agent_id": identity.agent_id, "logo_url": url}
