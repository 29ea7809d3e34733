"""Real estate company accounts (admin only)."""

from api._handler import JsonHandler
from src.models.company import CompanyForm
from src.models.profile import UserRole
from src.services.auth import require_auth
from src.services.companies import create_company, list_companies, update_company


class handler(JsonHandler):
    """GET lists, POST creates (auth user + agent + company), PATCH ?id= edits."""

    async def get(self, gateway):
        await require_auth(gateway, self.access_token(), required_role=UserRole.ADMIN)
        result = await list_companies(gateway)
        payload = {"companies": [c.model_dump(mode="json") for c in result.rows_or_empty()]}
        if not result.ok:
            payload["error"] = result.error.model_dump()
        return 200, payload

    async def post(self, gateway):
        await require_auth(gateway, self.access_token(), required_role=UserRole.ADMIN)
        form = CompanyForm.model_validate(self.json_body())
        created = await create_company(gateway, form)
        return 201, created.model_dump(mode="json")

    async def patch(self, gateway):
        await require_auth(gateway, self.access_token(), required_role=UserRole.ADMIN)
        company_id = self.require_query_value("id")
        form = CompanyForm.model_validate(self.json_body())
        updated = await update_company(gateway, company_id, form)
        return 200, updated.model_dump(mode="json")
