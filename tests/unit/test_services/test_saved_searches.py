"""Tests for saved searches."""

import pytest
from urllib.parse import parse_qs, urlsplit

from src.models.filters import FilterSpec
from src.models.property import ListingType, PropertyType
from src.models.saved_search import SavedSearch
from src.services.saved_searches import (
    delete_saved_search,
    list_saved_searches,
    save_search,
    saved_search_location,
)
from src.utils.errors import InvalidRequestError


@pytest.mark.unit
@pytest.mark.asyncio
async def test_save_and_rerun_search(gateway, db, make_user):
    """Test that a saved search stores the snapshot and rebuilds the listing URL."""
    user = make_user()
    filters = FilterSpec(city="Dubai", property_type=[PropertyType.VILLA], min_bed=3)

    search = await save_search(gateway, user.id, "  Family villas ", ListingType.RENT, filters)

    assert search.name == "Family villas"
    assert search.listing_type == ListingType.RENT
    stored = db.find("saved_searches", id=search.id)[0]
    assert stored["property_type"] == ["villa"]

    location = saved_search_location(search)
    parts = urlsplit(location)
    assert parts.path == "/rent"
    assert FilterSpec.from_query_params(parse_qs(parts.query)) == filters


@pytest.mark.unit
@pytest.mark.asyncio
async def test_blank_name_rejected(gateway, make_user):
    """Test that a saved search needs a name."""
    with pytest.raises(InvalidRequestError):
        await save_search(gateway, make_user().id, "   ", ListingType.BUY, FilterSpec())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_and_delete_saved_searches(gateway, db, make_user):
    """Test listing is per user and delete is scoped to the owner."""
    user = make_user()
    other = make_user()
    first = await save_search(gateway, user.id, "First", ListingType.BUY, FilterSpec())
    second = await save_search(gateway, user.id, "Second", ListingType.BUY, FilterSpec(city="Dubai"))
    await save_search(gateway, other.id, "Theirs", ListingType.BUY, FilterSpec())

    listed = await list_saved_searches(gateway, user.id)
    assert [s.id for s in listed.value] == [second.id, first.id]

    await delete_saved_search(gateway, other.id, first.id)
    assert db.find("saved_searches", id=first.id)

    await delete_saved_search(gateway, user.id, first.id)
    assert not db.find("saved_searches", id=first.id)


@pytest.mark.unit
def test_location_for_legacy_row_without_listing_type():
    """Test that rows saved without listing_type re-run on the buy page."""
    search = SavedSearch(id="s1", user_id="u1", name="Old")

    assert saved_search_location(search) == "/buy?"
