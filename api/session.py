"""Sign in / sign out and the current user."""

from api._handler import JsonHandler
from src.services.auth import get_current_user, require_auth, sign_in, sign_out
from src.utils.errors import InvalidRequestError


class handler(JsonHandler):
    """GET current user (null when anonymous), POST {"email", "password"}, DELETE signs out."""

    async def get(self, gateway):
        user = await get_current_user(gateway, self.access_token())
        return 200, {"user": user.model_dump(mode="json") if user else None}

    async def post(self, gateway):
        body = self.json_body()
        email = (body.get("email") or "").strip()
        password = body.get("password") or ""
        if not email or not password:
            raise InvalidRequestError("email and password are required")

        session = await sign_in(gateway, email, password)
        return 200, session

    async def delete(self, gateway):
        await require_auth(gateway, self.access_token())
        await sign_out(gateway, self.access_token())
        return 200, {"signed_out": True}
