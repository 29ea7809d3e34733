"""Property management - create, edit, status changes, deletion and detail lookup."""

from typing import Optional

from src.models.identity import EligibleCompanyNoAgent, Ineligible, listing_agent_id
from src.models.profile import UserProfile, UserRole
from src.models.property import Property, PropertyCreate, PropertyStatus, PropertyUpdate
from src.models.result import Result
from src.services.identity import find_agent_id, resolve_agent_identity
from src.services.image_upload import ImageFile, delete_property_images, upload_property_images
from src.services.listing_resolver import PROPERTIES_TABLE, newest_first
from src.services.supabase_client import SupabaseGateway, all_rows, first_row
from src.utils.errors import (
    AuthorizationError,
    NotFoundError,
    ProfileSetupRequiredError,
    StorageError,
    SupabaseError,
)
from src.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)

PROPERTY_WITH_AGENT = """
    *,
    agents (
        id, company_name, bio, phone, website, logo_url, user_id,
        profiles:user_id (full_name, avatar_url, email)
    )
"""


async def get_property_detail(gateway: SupabaseGateway, property_id: str) -> Property:
    """Property with its agent (and the agent's profile) for the detail page."""
    try:
        result = (
            gateway.table(PROPERTIES_TABLE)
            .select(PROPERTY_WITH_AGENT)
            .eq("id", property_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise SupabaseError(f"Failed to get property: {e}") from e

    row = first_row(result)
    if not row:
        raise NotFoundError("Property", property_id)
    return Property.model_validate(row)


async def _agent_id_for_new_listing(gateway: SupabaseGateway, profile: UserProfile, payload: PropertyCreate) -> Optional[str]:
    if profile.role == UserRole.ADMIN:
        return payload.agent_id or None

    identity = await resolve_agent_identity(gateway, profile.id)
    if isinstance(identity, Ineligible):
        raise ProfileSetupRequiredError("Please complete your agent profile first.")
    if isinstance(identity, EligibleCompanyNoAgent):
        # Company-owned listing without an individual agent
        logger.warning(
            "Creating company listing without agent",
            user_id=mask_user_id(profile.id),
            company_id=identity.company_id
        )
    return listing_agent_id(identity)


async def create_property(
    gateway: SupabaseGateway,
    profile: UserProfile,
    payload: PropertyCreate,
    images: Optional[list[ImageFile]] = None,
) -> Property:
    """
    Create a listing for an agent, company user or admin.

    Agents get their agent_id attached (company users are provisioned on the
    fly); admins may pick any agent_id. Images are uploaded after the insert
    under the new property's id. Steps are not transactional: a failed image
    upload leaves the listing without that image.
    """
    if not profile.can_manage_listings:
        raise AuthorizationError("Only agents and admins can list properties")

    agent_id = await _agent_id_for_new_listing(gateway, profile, payload)

    with log_timing("create_property", logger=logger, user_id=mask_user_id(profile.id)):
        try:
            result = gateway.table(PROPERTIES_TABLE).insert(payload.to_row(agent_id)).execute()
        except Exception as e:
            raise SupabaseError(f"Error creating property: {e}") from e

        row = first_row(result)
        if not row:
            raise SupabaseError("Error creating property: no data returned")
        created = Property.model_validate(row)

        if images:
            urls = await upload_property_images(gateway, images, created.id)
            if urls:
                created = await _update_row(gateway, created.id, {"images": (created.images or []) + urls})

    logger.info(
        "Property created",
        property_id=created.id,
        agent_id=created.agent_id,
        status=created.status.value,
        user_id=mask_user_id(profile.id)
    )
    return created


async def _update_row(gateway: SupabaseGateway, property_id: str, updates: dict) -> Property:
    try:
        result = gateway.table(PROPERTIES_TABLE).update(updates).eq("id", property_id).execute()
    except Exception as e:
        raise SupabaseError(f"Error updating property: {e}") from e

    row = first_row(result)
    if not row:
        raise NotFoundError("Property", property_id)
    return Property.model_validate(row)


async def _ensure_can_modify(gateway: SupabaseGateway, profile: UserProfile, property_id: str) -> Property:
    """Admins may modify any listing; agents only their own."""
    existing = await get_property_detail(gateway, property_id)
    if profile.role == UserRole.ADMIN:
        return existing

    if profile.role == UserRole.AGENT and existing.agent_id:
        if await find_agent_id(gateway, profile.id) == existing.agent_id:
            return existing

    raise AuthorizationError("Not allowed to modify this property")


async def update_property(
    gateway: SupabaseGateway,
    profile: UserProfile,
    property_id: str,
    payload: PropertyUpdate,
    new_images: Optional[list[ImageFile]] = None,
) -> Property:
    """Edit a listing; new uploads are appended after the kept images."""
    existing = await _ensure_can_modify(gateway, profile, property_id)

    updates = payload.to_row()
    reassigning = "agent_id" in updates and updates["agent_id"] != existing.agent_id
    if reassigning and profile.role != UserRole.ADMIN:
        raise AuthorizationError("Only admins can reassign a listing")
    if new_images:
        kept = updates.get("images", existing.images) or []
        uploaded = await upload_property_images(gateway, new_images, property_id)
        updates["images"] = kept + uploaded
    if "images" in updates and not updates["images"]:
        updates["images"] = None

    if not updates:
        return existing

    updated = await _update_row(gateway, property_id, updates)
    logger.info(
        "Property updated",
        property_id=property_id,
        fields=sorted(updates.keys()),
        user_id=mask_user_id(profile.id)
    )
    return updated


async def update_property_status(
    gateway: SupabaseGateway,
    profile: UserProfile,
    property_id: str,
    status: PropertyStatus,
) -> Property:
    await _ensure_can_modify(gateway, profile, property_id)
    status = PropertyStatus(status)
    updated = await _update_row(gateway, property_id, {"status": status.value})
    logger.info("Property status changed", property_id=property_id, status=status.value)
    return updated


async def delete_property(gateway: SupabaseGateway, profile: UserProfile, property_id: str) -> None:
    """Delete a listing, then its stored images (best effort)."""
    existing = await _ensure_can_modify(gateway, profile, property_id)

    try:
        gateway.table(PROPERTIES_TABLE).delete().eq("id", property_id).execute()
    except Exception as e:
        raise SupabaseError(f"Error deleting property: {e}") from e

    if existing.images:
        try:
            await delete_property_images(gateway, existing.images)
        except StorageError as e:
            logger.warning("Property deleted but images remain", property_id=property_id, error=str(e))

    logger.info("Property deleted", property_id=property_id, user_id=mask_user_id(profile.id))


async def list_agent_listings(gateway: SupabaseGateway, agent_id: str) -> Result[list[Property]]:
    """All of an agent's listings regardless of status (agent dashboard)."""
    try:
        result = newest_first(
            gateway.table(PROPERTIES_TABLE).select("*").eq("agent_id", agent_id)
        ).execute()
        return Result.success([Property.model_validate(row) for row in all_rows(result)])
    except Exception as e:
        logger.error("Agent listings query failed", agent_id=agent_id, error=str(e))
        return Result.failure("list_agent_listings", str(e), table=PROPERTIES_TABLE)


async def list_all_properties(gateway: SupabaseGateway) -> Result[list[Property]]:
    """Every listing with its agent (admin dashboard)."""
    try:
        result = newest_first(
            gateway.table(PROPERTIES_TABLE).select("*, agents (id, company_name, user_id)")
        ).execute()
        return Result.success([Property.model_validate(row) for row in all_rows(result)])
    except Exception as e:
        logger.error("Property list query failed", error=str(e))
        return Result.failure("list_all_properties", str(e), table=PROPERTIES_TABLE)
