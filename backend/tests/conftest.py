"""
Pytest configuration and fixtures
"""
from datetime import datetime, timezone as dt_timezone

import pytest
from rest_framework.test import APIClient

from apps.contacts.services import create_contact


def at(year, month, day, hour=12, minute=0):
    """Aware UTC timestamp for communication dates."""
    return datetime(year, month, day, hour, minute, tzinfo=dt_timezone.utc)


@pytest.fixture
def contact_data():
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "telephone": "+44 20 0000 0000",
        "company": "Analytical Engines",
        "product_interest": "Difference engine",
    }


@pytest.fixture
def contact(db, contact_data):
    """A stored contact without a workflow stage"""
    return create_contact(**contact_data)


@pytest.fixture
def other_contact(db):
    return create_contact(name="Charles Babbage", email="charles@example.com")


@pytest.fixture
def api_client():
    return APIClient()
