"""Dashboard data for admins, agents and regular users."""

from src.models.agent import Agent
from src.models.dashboard import AdminDashboard, AdminStats, AgentDashboard, AgentStats, UserDashboard
from src.models.identity import EligibleCompanyNoAgent, HasAgent
from src.models.profile import UserProfile, UserRole
from src.models.property import PropertyStatus
from src.models.result import Result
from src.services.auth import PROFILES_TABLE
from src.services.companies import list_companies
from src.services.favorites import list_favorites
from src.services.identity import AGENTS_TABLE, get_agent_profile, resolve_agent_identity
from src.services.properties import list_agent_listings, list_all_properties
from src.services.saved_searches import list_saved_searches
from src.services.supabase_client import SupabaseGateway, all_rows, first_row
from src.services.view_tracker import get_recently_viewed
from src.utils.errors import NotFoundError, SupabaseError
from src.utils.logging import get_structured_logger, mask_user_id, timed

logger = get_structured_logger(__name__)


async def list_users(gateway: SupabaseGateway) -> Result[list[UserProfile]]:
    try:
        result = gateway.table(PROFILES_TABLE).select("*").order("created_at", desc=True).execute()
        return Result.success([UserProfile.model_validate(row) for row in all_rows(result)])
    except Exception as e:
        logger.error("Users query failed", error=str(e))
        return Result.failure("list_users", str(e), table=PROFILES_TABLE)


async def list_agents(gateway: SupabaseGateway) -> Result[list[Agent]]:
    try:
        result = gateway.table(AGENTS_TABLE).select("*").order("created_at", desc=True).execute()
        return Result.success([Agent.model_validate(row) for row in all_rows(result)])
    except Exception as e:
        logger.error("Agents query failed", error=str(e))
        return Result.failure("list_agents", str(e), table=AGENTS_TABLE)


@timed("get_admin_dashboard", logger=logger)
async def get_admin_dashboard(gateway: SupabaseGateway) -> AdminDashboard:
    """
    Everything the admin dashboard shows plus headline counts.

    Sections that fail to load render empty and are named in ``errors``.
    """
    sections = {
        "properties": await list_all_properties(gateway),
        "users": await list_users(gateway),
        "agents": await list_agents(gateway),
        "companies": await list_companies(gateway),
    }

    errors = [name for name, result in sections.items() if not result.ok]
    properties = sections["properties"].rows_or_empty()
    users = sections["users"].rows_or_empty()
    agents = sections["agents"].rows_or_empty()

    stats = AdminStats(
        total_properties=len(properties),
        published_properties=sum(1 for p in properties if p.status == PropertyStatus.PUBLISHED),
        total_users=len(users),
        total_agents=len(agents),
    )
    if errors:
        logger.warning("Admin dashboard partially loaded", failed_sections=errors)

    return AdminDashboard(
        properties=properties,
        users=users,
        agents=agents,
        companies=sections["companies"].rows_or_empty(),
        stats=stats,
        errors=errors,
    )


async def get_agent_dashboard(gateway: SupabaseGateway, user_id: str) -> AgentDashboard:
    """Listings and stats for the signed-in agent (or company user)."""
    identity = await resolve_agent_identity(gateway, user_id)

    if not isinstance(identity, HasAgent):
        return AgentDashboard(is_real_estate_company=isinstance(identity, EligibleCompanyNoAgent))

    listings = (await list_agent_listings(gateway, identity.agent_id)).rows_or_empty()
    agent = await get_agent_profile(gateway, user_id)

    logger.info(
        "Agent dashboard loaded",
        user_id=mask_user_id(user_id),
        agent_id=identity.agent_id,
        listing_count=len(listings)
    )
    return AgentDashboard(
        agent_id=identity.agent_id,
        agent=agent,
        listings=listings,
        stats=AgentStats.from_listings(listings),
    )


async def get_user_dashboard(gateway: SupabaseGateway, user_id: str) -> UserDashboard:
    saved = await list_saved_searches(gateway, user_id)
    viewed = await get_recently_viewed(gateway, user_id)
    favorites = await list_favorites(gateway, user_id, limit=gateway.config.recently_viewed_limit)

    return UserDashboard(
        saved_searches=saved.rows_or_empty(),
        recently_viewed=viewed.rows_or_empty(),
        favorites=favorites.rows_or_empty(),
    )


async def update_user_role(gateway: SupabaseGateway, user_id: str, role: UserRole) -> UserProfile:
    role = UserRole(role)
    try:
        result = gateway.table(PROFILES_TABLE).update({"role": role.value}).eq("id", user_id).execute()
    except Exception as e:
        raise SupabaseError(f"Error updating user role: {e}") from e

    row = first_row(result)
    if not row:
        raise NotFoundError("User", user_id)

    logger.info("User role updated", user_id=mask_user_id(user_id), role=role.value)
    return UserProfile.model_validate(row)
