"""Admin dashboard endpoint."""

from api._handler import JsonHandler
from src.models.profile import UserRole
from src.services.auth import require_auth
from src.services.dashboards import get_admin_dashboard, update_user_role
from src.utils.errors import InvalidRequestError


class handler(JsonHandler):
    """GET dashboard data and stats; PATCH {"user_id", "role"} changes a user's role."""

    async def get(self, gateway):
        await require_auth(gateway, self.access_token(), required_role=UserRole.ADMIN)
        dashboard = await get_admin_dashboard(gateway)
        return 200, dashboard.model_dump(mode="json")

    async def patch(self, gateway):
        await require_auth(gateway, self.access_token(), required_role=UserRole.ADMIN)
        body = self.json_body()
        user_id = body.get("user_id")
        if not user_id:
            raise InvalidRequestError("user_id is required")
        try:
            role = UserRole(body.get("role"))
        except ValueError as e:
            raise InvalidRequestError(f"Unknown role: {body.get('role')}") from e

        profile = await update_user_role(gateway, user_id, role)
        return 200, {"user": profile.model_dump(mode="json")}
