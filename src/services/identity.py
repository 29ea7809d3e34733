"""Agent identity resolution - map an auth user to the agents table, provisioning company users."""

from typing import Optional

from src.models.agent import Agent
from src.models.company import RealEstateCompany
from src.models.identity import EligibleCompanyNoAgent, HasAgent, Identity, Ineligible
from src.services.supabase_client import SupabaseGateway, first_row, is_unique_violation
from src.utils.errors import NotFoundError, SupabaseError
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

AGENTS_TABLE = "agents"
COMPANIES_TABLE = "real_estate_companies"
AGENT_WITH_PROFILE = "*, profiles:user_id (full_name, email, avatar_url)"


def _find_agent_row(gateway: SupabaseGateway, user_id: str, columns: str = "id") -> Optional[dict]:
    result = gateway.table(AGENTS_TABLE).select(columns).eq("user_id", user_id).limit(1).execute()
    return first_row(result)


def _find_company(gateway: SupabaseGateway, user_id: str) -> Optional[RealEstateCompany]:
    result = gateway.table(COMPANIES_TABLE).select("*").eq("user_id", user_id).limit(1).execute()
    row = first_row(result)
    return RealEstateCompany.model_validate(row) if row else None


def _provision_agent(gateway: SupabaseGateway, user_id: str, company: RealEstateCompany) -> Identity:
    """Insert an agents row for a company user; the unique user_id decides races."""
    new_agent = {
        "user_id": user_id,
        "company_name": company.company_name,
        "phone": company.phone_number or None,
    }

    try:
        result = gateway.table(AGENTS_TABLE).insert(new_agent).execute()
        row = first_row(result)
        if row and row.get("id"):
            logger.info(
                "Provisioned agent for real estate company user",
                user_id=mask_user_id(user_id),
                company_id=company.id,
                agent_id=row["id"]
            )
            return HasAgent(agent_id=row["id"], provisioned=True)
        logger.warning(
            "Agent insert returned no row",
            user_id=mask_user_id(user_id),
            company_id=company.id
        )
    except Exception as e:
        if not is_unique_violation(e):
            logger.warning(
                "Agent provisioning failed, continuing as company without agent",
                user_id=mask_user_id(user_id),
                company_id=company.id,
                error=str(e)
            )
            return EligibleCompanyNoAgent(company_id=company.id)

        logger.info(
            "Agent already provisioned by a concurrent request",
            user_id=mask_user_id(user_id),
            company_id=company.id
        )

    # Lost the race (or insert returned nothing): adopt whichever row exists now
    try:
        existing = _find_agent_row(gateway, user_id)
    except Exception as e:
        logger.warning(
            "Agent re-query after provisioning failed",
            user_id=mask_user_id(user_id),
            error=str(e)
        )
        existing = None

    if existing:
        return HasAgent(agent_id=existing["id"], provisioned=False)
    return EligibleCompanyNoAgent(company_id=company.id)


async def resolve_agent_identity(gateway: SupabaseGateway, user_id: str) -> Identity:
    """
    Resolve a user to an agent identity.

    Agent row -> HasAgent. Otherwise a real estate company gets an agents row
    created on the fly; if that cannot be done the result is
    EligibleCompanyNoAgent and listings are created with agent_id = null.
    Anyone else is Ineligible. Note this performs a write on first use.
    """
    if not user_id:
        return Ineligible()

    try:
        agent_row = _find_agent_row(gateway, user_id)
        if agent_row:
            return HasAgent(agent_id=agent_row["id"])

        company = _find_company(gateway, user_id)
    except Exception as e:
        logger.error(
            "Error resolving agent identity",
            user_id=mask_user_id(user_id),
            error=str(e)
        )
        raise SupabaseError(f"Failed to resolve agent identity: {e}") from e

    if company is None:
        logger.debug("User is neither agent nor company", user_id=mask_user_id(user_id))
        return Ineligible()

    return _provision_agent(gateway, user_id, company)


async def find_agent_id(gateway: SupabaseGateway, user_id: str) -> Optional[str]:
    """Existing agents row id for a user, without provisioning."""
    if not user_id:
        return None

    try:
        row = _find_agent_row(gateway, user_id)
    except Exception as e:
        raise SupabaseError(f"Failed to look up agent: {e}") from e
    return row["id"] if row else None


async def get_agent_profile(gateway: SupabaseGateway, user_id: str) -> Optional[Agent]:
    """Agent row with joined profile for the dashboard header; provisions company users first."""
    identity = await resolve_agent_identity(gateway, user_id)
    if not isinstance(identity, HasAgent):
        return None

    try:
        result = (
            gateway.table(AGENTS_TABLE)
            .select(AGENT_WITH_PROFILE)
            .eq("id", identity.agent_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise SupabaseError(f"Failed to load agent profile: {e}") from e

    row = first_row(result)
    return Agent.model_validate(row) if row else None


async def get_agent_by_id(gateway: SupabaseGateway, agent_id: str) -> Agent:
    """Public agent page lookup."""
    try:
        result = (
            gateway.table(AGENTS_TABLE)
            .select(AGENT_WITH_PROFILE)
            .eq("id", agent_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise SupabaseError(f"Failed to get agent: {e}") from e

    row = first_row(result)
    if not row:
        raise NotFoundError("Agent", agent_id)
    return Agent.model_validate(row)
