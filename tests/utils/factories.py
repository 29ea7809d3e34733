"""Test data factories using Faker."""

from faker import Faker
from typing import Optional

fake = Faker()

PROPERTY_TYPES = ["apartment", "villa", "townhouse", "land", "commercial"]


def create_profile_data(role: str = "user", user_id: Optional[str] = None) -> dict:
    """Create test profile row data."""
    return {
        "id": user_id or fake.uuid4(),
        "email": fake.email(),
        "full_name": fake.name(),
        "avatar_url": None,
        "role": role,
    }


def create_agent_data(user_id: str, company_name: Optional[str] = None) -> dict:
    """Create test agents row data."""
    return {
        "user_id": user_id,
        "company_name": company_name or fake.company(),
        "bio": fake.sentence(nb_words=8),
        "phone": fake.phone_number(),
        "website": fake.url(),
        "logo_url": None,
    }


def create_company_data(user_id: Optional[str] = None) -> dict:
    """Create test real_estate_companies row data."""
    return {
        "user_id": user_id,
        "company_name": fake.company(),
        "contact_person_name": fake.name(),
        "phone_number": fake.phone_number(),
        "email": fake.company_email(),
    }


def create_property_data(
    listing_type: str = "buy",
    status: str = "published",
    agent_id: Optional[str] = None,
    **overrides
) -> dict:
    """Create test properties row data."""
    data = {
        "title": fake.sentence(nb_words=4),
        "description": fake.text(max_nb_chars=120),
        "property_type": fake.random_element(PROPERTY_TYPES),
        "listing_type": listing_type,
        "price": float(fake.random_int(min=50_000, max=2_000_000)),
        "bed": fake.random_int(min=0, max=6),
        "bath": fake.random_int(min=1, max=4),
        "area": float(fake.random_int(min=300, max=6000)),
        "location": fake.street_address(),
        "city": fake.random_element(["Dubai", "Abu Dhabi", "Sharjah"]),
        "latitude": None,
        "longitude": None,
        "images": None,
        "status": status,
        "agent_id": agent_id,
    }
    data.update(overrides)
    return data


def create_property_payload(**overrides) -> dict:
    """Create a valid PropertyCreate request body."""
    data = {
        "title": fake.sentence(nb_words=4),
        "description": fake.text(max_nb_chars=120),
        "property_type": "villa",
        "listing_type": "buy",
        "price": 950000,
        "bed": 4,
        "bath": 3,
        "area": 3200,
        "location": fake.street_address(),
        "city": "Dubai",
        "status": "published",
    }
    data.update(overrides)
    return data
