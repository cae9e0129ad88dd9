"""
WareTrack — Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from rest_framework.test import APIClient

from tests.factories import AdminUserFactory, ProductFactory, UserFactory


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Active operator with default PIN 1234."""
    return UserFactory()


@pytest.fixture
def admin_user(db):
    """Active admin-role user with default PIN 1234."""
    return AdminUserFactory()


@pytest.fixture
def product(db):
    """Active product with an empty ledger."""
    return ProductFactory()


@pytest.fixture
def authenticated_client(api_client, user):
    """API client authenticated as an operator."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    """API client authenticated as an admin."""
    api_client.force_authenticate(user=admin_user)
    return api_client
