"""
Users — API Integration Tests

End-to-end tests for name + PIN login and admin user management.

@file users/tests/test_views.py
"""

import pytest
from django.urls import reverse
from rest_framework import status

from core.models import AuditLog
from tests.factories import UserFactory
from users.models import User


pytestmark = pytest.mark.django_db


class TestLoginEndpoint:

    def test_login_success(self, api_client):
        UserFactory(name='Ravi', pin='2468')
        response = api_client.post(
            reverse('api-v1:auth:login'), {'name': 'Ravi', 'pin': '2468'}, format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data['success'] is True
        assert 'access' in data['data']
        assert 'refresh' in data['data']
        assert data['data']['user']['name'] == 'Ravi'
        assert AuditLog.objects.filter(action='LOGIN').exists()

    def test_login_wrong_pin(self, api_client):
        UserFactory(name='Ravi', pin='2468')
        response = api_client.post(
            reverse('api-v1:auth:login'), {'name': 'Ravi', 'pin': '1111'}, format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert AuditLog.objects.filter(action='LOGIN_FAILED').exists()

    def test_login_inactive(self, api_client):
        UserFactory(name='Ravi', pin='2468', is_active=False)
        response = api_client.post(
            reverse('api-v1:auth:login'), {'name': 'Ravi', 'pin': '2468'}, format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_access_token_works(self, api_client):
        UserFactory(name='Ravi', pin='2468')
        login = api_client.post(
            reverse('api-v1:auth:login'), {'name': 'Ravi', 'pin': '2468'}, format='json',
        ).json()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {login['data']['access']}")
        response = api_client.get(reverse('api-v1:auth:me'))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['name'] == 'Ravi'


class TestMeEndpoint:

    def test_requires_auth(self, api_client):
        assert api_client.get(reverse('api-v1:auth:me')).status_code == status.HTTP_401_UNAUTHORIZED

    def test_me(self, authenticated_client, user):
        response = authenticated_client.get(reverse('api-v1:auth:me'))
        assert response.data['data']['id'] == str(user.pk)
        assert response.data['data']['role'] == 'operator'


class TestUserManagement:

    def test_operator_forbidden(self, authenticated_client):
        response = authenticated_client.get(reverse('api-v1:users:user-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list(self, admin_client):
        UserFactory.create_batch(2)
        response = admin_client.get(reverse('api-v1:users:user-list'))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3

    def test_create(self, admin_client):
        response = admin_client.post(
            reverse('api-v1:users:user-list'),
            {'name': 'Meera', 'pin': '1357', 'role': 'admin'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert 'pin' not in response.data
        assert User.objects.get(name='Meera').is_admin

    def test_create_bad_pin(self, admin_client):
        response = admin_client.post(
            reverse('api-v1:users:user-list'), {'name': 'Meera', 'pin': '12a4'}, format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_set_active(self, admin_client):
        target = UserFactory()
        response = admin_client.post(
            reverse('api-v1:users:user-set-active', args=[target.pk]),
            {'is_active': False}, format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        target.refresh_from_db()
        assert target.is_active is False

    def test_reset_pin(self, admin_client):
        target = UserFactory()
        response = admin_client.post(
            reverse('api-v1:users:user-reset-pin', args=[target.pk]),
            {'pin': '8642'}, format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        target.refresh_from_db()
        assert target.check_password('8642')

    def test_delete_not_allowed(self, admin_client):
        target = UserFactory()
        response = admin_client.delete(reverse('api-v1:users:user-detail', args=[target.pk]))
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
