"""User dashboard: saved searches, recently viewed and favorites."""

from api._handler import JsonHandler
from src.services.auth import require_auth
from src.services.dashboards import get_user_dashboard


class handler(JsonHandler):

    async def get(self, gateway):
        user = await require_auth(gateway, self.access_token())
        dashboard = await get_user_dashboard(gateway, user.id)
        return 200, dashboard.model_dump(mode="json")
