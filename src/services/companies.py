"""Real estate company accounts managed from the admin dashboard."""

from typing import Optional

from src.models.company import CompanyCreation, CompanyForm, RealEstateCompany
from src.models.profile import UserRole
from src.models.result import Result
from src.services.auth import PROFILES_TABLE
from src.services.identity import AGENTS_TABLE, COMPANIES_TABLE
from src.services.supabase_client import SupabaseGateway, all_rows, first_row
from src.utils.errors import InvalidRequestError, NotFoundError, SupabaseError
from src.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)


def _create_auth_user(gateway: SupabaseGateway, form: CompanyForm) -> str:
    try:
        response = gateway.auth.admin.create_user({
            "email": form.email,
            "password": form.password,
            "email_confirm": True,
            "user_metadata": {
                "full_name": form.contact_person_name,
                "role": UserRole.AGENT.value,
            },
        })
    except Exception as e:
        raise SupabaseError(f"Error creating user account: {e}") from e

    user = getattr(response, "user", None)
    if user is None:
        raise SupabaseError("Error creating user account: user was not created")
    return user.id


def _ensure_agent_profile(gateway: SupabaseGateway, user_id: str, form: CompanyForm) -> Optional[str]:
    """Upsert the profile as an agent; returns a warning on failure."""
    try:
        (
            gateway.table(PROFILES_TABLE)
            .upsert({
                "id": user_id,
                "email": form.email,
                "full_name": form.contact_person_name,
                "role": UserRole.AGENT.value,
            }, on_conflict="id")
            .execute()
        )
    except Exception as e:
        logger.warning("Error upserting company profile", user_id=mask_user_id(user_id), error=str(e))
        return f"Profile setup failed: {e}"
    return None


def _ensure_agent(gateway: SupabaseGateway, user_id: str, form: CompanyForm) -> tuple[Optional[str], Optional[str]]:
    """Create or refresh the agents row; returns (agent_id, warning)."""
    agent_fields = {"company_name": form.company_name, "phone": form.phone_number or None}
    try:
        existing = first_row(
            gateway.table(AGENTS_TABLE).select("id").eq("user_id", user_id).limit(1).execute()
        )
        if existing:
            gateway.table(AGENTS_TABLE).update(agent_fields).eq("id", existing["id"]).execute()
            return existing["id"], None

        created = first_row(
            gateway.table(AGENTS_TABLE).insert({"user_id": user_id, **agent_fields}).execute()
        )
        if not created:
            return None, "Agent profile failed: no data returned"
        return created["id"], None
    except Exception as e:
        logger.warning("Error creating company agent", user_id=mask_user_id(user_id), error=str(e))
        return None, f"Agent profile failed: {e}"


async def create_company(gateway: SupabaseGateway, form: CompanyForm) -> CompanyCreation:
    """
    Create a company account in four steps: auth user, agent profile,
    agents row, company row.

    A failed auth user or company insert raises. Profile and agent failures are
    collected as warnings and creation continues. Earlier steps are not rolled
    back when a later one fails.
    """
    if not form.password:
        raise InvalidRequestError("Password is required when creating a company")

    warnings: list[str] = []

    with log_timing("create_company", logger=logger):
        user_id = _create_auth_user(gateway, form)

        profile_warning = _ensure_agent_profile(gateway, user_id, form)
        if profile_warning:
            warnings.append(profile_warning)

        agent_id, agent_warning = _ensure_agent(gateway, user_id, form)
        if agent_warning:
            warnings.append(agent_warning)

        try:
            result = gateway.table(COMPANIES_TABLE).insert({
                "email": form.email,
                "company_name": form.company_name,
                "contact_person_name": form.contact_person_name,
                "phone_number": form.phone_number or None,
                "user_id": user_id,
            }).execute()
        except Exception as e:
            raise SupabaseError(f"Error creating company: {e}") from e

        row = first_row(result)
        if not row:
            raise SupabaseError("Error creating company: no data returned")

    logger.info(
        "Company created",
        company_id=row["id"],
        user_id=mask_user_id(user_id),
        agent_id=agent_id,
        warning_count=len(warnings)
    )
    return CompanyCreation(
        company=RealEstateCompany.model_validate(row),
        agent_id=agent_id,
        warnings=warnings,
    )


async def get_company(gateway: SupabaseGateway, company_id: str) -> RealEstateCompany:
    try:
        result = gateway.table(COMPANIES_TABLE).select("*").eq("id", company_id).limit(1).execute()
    except Exception as e:
        raise SupabaseError(f"Failed to get company: {e}") from e
    row = first_row(result)
    if not row:
        raise NotFoundError("Company", company_id)
    return RealEstateCompany.model_validate(row)


async def update_company(gateway: SupabaseGateway, company_id: str, form: CompanyForm) -> CompanyCreation:
    """
    Update a company and keep its profile and agents row in sync.

    The company update must succeed; the password, profile and agent syncs
    are best effort and reported as warnings.
    """
    company = await get_company(gateway, company_id)

    updates = {
        "company_name": form.company_name,
        "contact_person_name": form.contact_person_name,
        "phone_number": form.phone_number or None,
    }
    if form.email != company.email:
        updates["email"] = form.email

    try:
        result = gateway.table(COMPANIES_TABLE).update(updates).eq("id", company_id).execute()
    except Exception as e:
        raise SupabaseError(f"Error updating company: {e}") from e

    updated = RealEstateCompany.model_validate(first_row(result) or {**company.model_dump(), **updates})
    warnings: list[str] = []
    agent_id: Optional[str] = None

    if company.user_id:
        if form.password:
            try:
                gateway.auth.admin.update_user_by_id(company.user_id, {"password": form.password})
            except Exception as e:
                logger.warning("Error updating company password", company_id=company_id, error=str(e))
                warnings.append(f"Password update failed: {e}")

        try:
            (
                gateway.table(PROFILES_TABLE)
                .update({"email": form.email, "full_name": form.contact_person_name})
                .eq("id", company.user_id)
                .execute()
            )
        except Exception as e:
            logger.warning("Error updating company profile", company_id=company_id, error=str(e))
            warnings.append(f"Profile update failed: {e}")

        try:
            agent = first_row(
                gateway.table(AGENTS_TABLE).select("id").eq("user_id", company.user_id).limit(1).execute()
            )
            if agent:
                agent_id = agent["id"]
                (
                    gateway.table(AGENTS_TABLE)
                    .update({"company_name": form.company_name, "phone": form.phone_number or None})
                    .eq("id", agent_id)
                    .execute()
                )
        except Exception as e:
            logger.warning("Error updating company agent", company_id=company_id, error=str(e))
            warnings.append(f"Agent update failed: {e}")

    logger.info("Company updated", company_id=company_id, warning_count=len(warnings))
    return CompanyCreation(company=updated, agent_id=agent_id, warnings=warnings)


async def list_companies(gateway: SupabaseGateway) -> Result[list[RealEstateCompany]]:
    try:
        result = gateway.table(COMPANIES_TABLE).select("*").order("created_at", desc=True).execute()
        return Result.success([RealEstateCompany.model_validate(row) for row in all_rows(result)])
    except Exception as e:
        logger.error("Companies query failed", error=str(e))
        return Result.failure("list_companies", str(e), table=COMPANIES_TABLE)
