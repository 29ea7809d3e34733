"""Tests for property read and write models."""

import pytest
from pydantic import ValidationError

from src.models.property import (
    ListingType,
    Property,
    PropertyCreate,
    PropertyStatus,
    PropertyType,
    PropertyUpdate,
)


@pytest.mark.unit
def test_property_from_row_with_defaults():
    """Test reading a minimal properties row."""
    prop = Property.model_validate({
        "id": "p1",
        "title": "Marina view",
        "property_type": "apartment",
        "listing_type": "rent",
        "price": 85000,
        "views": None,
    })

    assert prop.listing_type == ListingType.RENT
    assert prop.status == PropertyStatus.DRAFT
    assert prop.agent_id is None
    assert prop.has_coordinates is False


@pytest.mark.unit
def test_property_with_joined_agent():
    """Test that an embedded agents row with profile is parsed."""
    prop = Property.model_validate({
        "id": "p1",
        "title": "Villa",
        "property_type": "villa",
        "listing_type": "buy",
        "price": 1,
        "agents": {
            "id": "a1",
            "company_name": None,
            "profiles": {"full_name": "Dana Agent", "email": "dana@example.com"},
        },
    })

    assert prop.agents.id == "a1"
    assert prop.agents.display_name == "Dana Agent"


@pytest.mark.unit
def test_property_create_defaults_and_row():
    """Test PropertyCreate defaults and insert row shape."""
    payload = PropertyCreate(title="Plot", price=400000, agent_id="ignored")

    row = payload.to_row("agent-1")

    assert payload.status == PropertyStatus.DRAFT
    assert row["property_type"] == PropertyType.APARTMENT.value
    assert row["listing_type"] == "buy"
    assert row["agent_id"] == "agent-1"
    assert row["images"] is None


@pytest.mark.unit
@pytest.mark.parametrize("field,value", [
    ("price", 0),
    ("price", -5),
    ("bed", -1),
    ("bath", -1),
    ("area", 0),
])
def test_property_create_rejects_out_of_range(field, value):
    """Test numeric constraints on new listings."""
    data = {"title": "x", "price": 100}
    data[field] = value
    with pytest.raises(ValidationError):
        PropertyCreate(**data)


@pytest.mark.unit
def test_property_create_requires_paired_coordinates():
    """Test that latitude and longitude must be set together and in range."""
    with pytest.raises(ValidationError):
        PropertyCreate(title="x", price=1, latitude=25.2)
    with pytest.raises(ValidationError):
        PropertyCreate(title="x", price=1, latitude=95, longitude=55)

    ok = PropertyCreate(title="x", price=1, latitude=25.2, longitude=55.3)
    assert ok.latitude == 25.2


@pytest.mark.unit
def test_property_update_only_includes_set_fields():
    """Test that partial updates leave untouched fields out of the row."""
    update = PropertyUpdate(price=120000, status="sold")

    assert update.to_row() == {"price": 120000.0, "status": "sold"}


@pytest.mark.unit
def test_property_update_checks_coordinates_when_set():
    """Test that coordinate pairing is validated only when coordinates are edited."""
    assert PropertyUpdate(title="new").to_row() == {"title": "new"}
    with pytest.raises(ValidationError):
        PropertyUpdate(longitude=55.0)
    with pytest.raises(ValidationError):
        PropertyUpdate.model_validate({"latitude": None})
    assert PropertyUpdate(latitude=None, longitude=None).to_row() == {"latitude": None, "longitude": None}


@pytest.mark.unit
@pytest.mark.parametrize("field", ["title", "price", "property_type", "listing_type", "status"])
def test_property_update_rejects_null_required_columns(field):
    """Test explicit nulls are refused for columns a listing cannot lose."""
    with pytest.raises(ValidationError) as exc_info:
        PropertyUpdate.model_validate({field: None})

    assert exc_info.value.errors()[0]["loc"] == (field,)


@pytest.mark.unit
def test_property_update_allows_clearing_optional_columns():
    update = PropertyUpdate.model_validate({"description": None, "bed": None, "area": None})

    assert update.to_row() == {"description": None, "bed": None, "area": None}
