"""Tests for property creation, editing, status changes and deletion."""

import pytest

from src.models.property import PropertyCreate, PropertyStatus, PropertyUpdate
from src.services.image_upload import ImageFile
from src.services.properties import (
    create_property,
    delete_property,
    get_property_detail,
    list_agent_listings,
    update_property,
    update_property_status,
)
from src.utils.errors import AuthorizationError, NotFoundError, ProfileSetupRequiredError
from tests.utils.factories import create_property_data, create_property_payload


def _image(name: str = "front.jpg") -> ImageFile:
    return ImageFile(filename=name, content=b"\xff\xd8\xff", content_type="image/jpeg")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_agent_creates_listing_with_own_agent_id(gateway, agent_user):
    """Test that an agent's listing is attached to their agents row."""
    profile, agent_id = agent_user
    payload = PropertyCreate(**create_property_payload(agent_id="spoofed"))

    created = await create_property(gateway, profile, payload)

    assert created.agent_id == agent_id
    assert created.status == PropertyStatus.PUBLISHED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_company_user_listing_provisions_agent(gateway, db, company_user):
    """Test a company user's first listing provisions and uses an agent."""
    profile, _ = company_user

    created = await create_property(gateway, profile, PropertyCreate(**create_property_payload()))

    agent_rows = db.find("agents", user_id=profile.id)
    assert len(agent_rows) == 1
    assert created.agent_id == agent_rows[0]["id"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_company_listing_without_agent_when_provisioning_fails(gateway, db, company_user):
    """Test company-owned listings are created with no agent when provisioning fails."""
    profile, _ = company_user
    db.fail("agents", "insert")

    created = await create_property(gateway, profile, PropertyCreate(**create_property_payload()))

    assert created.agent_id is None
    assert db.find("properties", id=created.id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_agent_role_without_identity_needs_profile_setup(gateway, db, make_user):
    """Test an agent-role user with no agent or company row is sent to profile setup."""
    profile = make_user("agent")

    with pytest.raises(ProfileSetupRequiredError) as exc_info:
        await create_property(gateway, profile, PropertyCreate(**create_property_payload()))

    assert exc_info.value.redirect_to == "/agent"
    assert db.rows("properties") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_regular_user_cannot_list(gateway, make_user):
    """Test that the user role cannot create listings."""
    with pytest.raises(AuthorizationError):
        await create_property(gateway, make_user("user"), PropertyCreate(**create_property_payload()))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_picks_agent(gateway, admin_user, agent_user):
    """Test admins may assign any agent."""
    _, agent_id = agent_user

    created = await create_property(gateway, admin_user, PropertyCreate(**create_property_payload(agent_id=agent_id)))

    assert created.agent_id == agent_id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_with_images_skips_failed_upload(gateway, agent_user):
    """Test image URLs are stored in order, skipping files that failed to upload."""
    profile, _ = agent_user
    bucket = gateway.images_bucket()
    bucket.failing_uploads = {1}

    created = await create_property(
        gateway, profile, PropertyCreate(**create_property_payload()),
        images=[_image("a.jpg"), _image("b.png"), _image("c.webp")],
    )

    assert len(created.images) == 2
    assert created.images[0].endswith(".jpg")
    assert created.images[1].endswith(".webp")
    assert all(f"/property-images/property-images/{created.id}/" in url for url in created.images)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_appends_new_images(gateway, db, agent_user):
    """Test editing keeps existing images and appends new uploads."""
    profile, agent_id = agent_user
    row = db.add("properties", create_property_data(agent_id=agent_id, images=["https://cdn/old.jpg"]))

    updated = await update_property(
        gateway, profile, row["id"], PropertyUpdate(price=777000), new_images=[_image()]
    )

    assert updated.price == 777000
    assert updated.images[0] == "https://cdn/old.jpg"
    assert len(updated.images) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_other_agent_cannot_modify(gateway, db, agent_user, make_user):
    """Test ownership is enforced for non-admins."""
    _, agent_id = agent_user
    row = db.add("properties", create_property_data(agent_id=agent_id))
    intruder = make_user("agent")
    db.add("agents", {"user_id": intruder.id, "company_name": "Other"})

    with pytest.raises(AuthorizationError):
        await update_property_status(gateway, intruder, row["id"], PropertyStatus.SOLD)
    with pytest.raises(AuthorizationError):
        await delete_property(gateway, intruder, row["id"])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_owner_changes_status(gateway, db, agent_user):
    """Test the owning agent can mark a listing as sold."""
    profile, agent_id = agent_user
    row = db.add("properties", create_property_data(agent_id=agent_id))

    updated = await update_property_status(gateway, profile, row["id"], "sold")

    assert updated.status == PropertyStatus.SOLD


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_deletes_listing_and_images(gateway, db, admin_user):
    """Test deletion removes the row and its stored images."""
    bucket = gateway.images_bucket()
    bucket.upload("property-images/p1/1-abc.jpg", b"x", {})
    url = bucket.get_public_url("property-images/p1/1-abc.jpg")
    row = db.add("properties", create_property_data(id="p1", images=[url]))

    await delete_property(gateway, admin_user, row["id"])

    assert db.rows("properties") == []
    assert bucket.objects == {}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_survives_image_cleanup_failure(gateway, db, admin_user):
    """Test a storage failure after the row delete does not fail the request."""
    bucket = gateway.images_bucket()
    bucket.fail_remove = True
    url = bucket.get_public_url("property-images/p1/1-abc.jpg")
    row = db.add("properties", create_property_data(images=[url]))

    await delete_property(gateway, admin_user, row["id"])

    assert db.rows("properties") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_property_detail_embeds_agent_profile(gateway, db, agent_user):
    """Test the detail lookup joins agent and agent profile."""
    profile, agent_id = agent_user
    row = db.add("properties", create_property_data(agent_id=agent_id))

    prop = await get_property_detail(gateway, row["id"])

    assert prop.agents.id == agent_id
    assert prop.agents.profiles.full_name == profile.full_name


@pytest.mark.unit
@pytest.mark.asyncio
async def test_property_detail_not_found(gateway):
    with pytest.raises(NotFoundError):
        await get_property_detail(gateway, "missing")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_agent_listings_include_all_statuses(gateway, db, agent_user):
    """Test the agent dashboard sees drafts too."""
    _, agent_id = agent_user
    db.add("properties", create_property_data(agent_id=agent_id, status="draft"))
    db.add("properties", create_property_data(agent_id=agent_id, status="published"))

    result = await list_agent_listings(gateway, agent_id)

    assert len(result.value) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_owner_cannot_reassign_listing(gateway, db, agent_user, make_user):
    """Test an agent editing their own listing cannot hand it to another agent."""
    profile, agent_id = agent_user
    other = make_user("agent")
    other_agent = db.add("agents", {"user_id": other.id, "company_name": "Other"})
    row = db.add("properties", create_property_data(agent_id=agent_id))

    with pytest.raises(AuthorizationError):
        await update_property(gateway, profile, row["id"], PropertyUpdate(agent_id=other_agent["id"]))

    assert db.find("properties", id=row["id"])[0]["agent_id"] == agent_id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_reassigns_listing(gateway, db, admin_user, agent_user, make_user):
    _, agent_id = agent_user
    other = make_user("agent")
    other_agent = db.add("agents", {"user_id": other.id, "company_name": "Other"})
    row = db.add("properties", create_property_data(agent_id=agent_id))

    updated = await update_property(gateway, admin_user, row["id"], PropertyUpdate(agent_id=other_agent["id"]))

    assert updated.agent_id == other_agent["id"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_moves_both_coordinates(gateway, db, agent_user):
    """Test a coordinate edit writes the pair together."""
    profile, agent_id = agent_user
    row = db.add("properties", create_property_data(agent_id=agent_id, latitude=25.2, longitude=55.3))

    updated = await update_property(gateway, profile, row["id"], PropertyUpdate(latitude=None, longitude=None))

    assert (updated.latitude, updated.longitude) == (None, None)
    stored = db.find("properties", id=row["id"])[0]
    assert stored["title"] == row["title"]
    assert stored["price"] == row["price"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ownership_check_does_not_provision_agent(gateway, db, company_user):
    """Test a company user without an agents row is refused without creating one."""
    profile, _ = company_user
    row = db.add("properties", create_property_data(agent_id="someone-else"))

    with pytest.raises(AuthorizationError):
        await update_property_status(gateway, profile, row["id"], PropertyStatus.SOLD)

    assert db.find("agents", user_id=profile.id) == []
