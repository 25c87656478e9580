"""
Unit Tests for Admin API Endpoints
Tests for: admin login, user listing, suspension and limits, platform stats
"""
import pytest
from unittest.mock import patch
from httpx import AsyncClient

from formflow.core.config import settings

from conftest import make_user, make_form, auth_headers_for, form_payload


@pytest.fixture
async def admin_headers(client: AsyncClient):
    response = await client.post('/api/admin/login', json={
        'username': 'admin',
        'password': 'test-admin-password',
    })
    return {'x-admin-session': response.json()['sessionToken']}


class TestAdminLogin:
    """Test admin authentication"""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient):
        response = await client.post('/api/admin/login', json={
            'username': 'admin',
            'password': 'test-admin-password',
        })

        assert response.status_code == 200
        assert response.json()['sessionToken']

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient):
        response = await client.post('/api/admin/login', json={'username': 'admin', 'password': 'guess'})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_disabled_without_password(self, client: AsyncClient):
        """Test admin login is refused when no admin password is configured"""
        with patch.object(settings, 'ADMIN_PASSWORD', ''):
            response = await client.post('/api/admin/login', json={'username': 'admin', 'password': 'x'})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_endpoints_require_admin_session(self, client: AsyncClient, auth_headers):
        anonymous = await client.get('/api/admin/users')
        owner = await client.get('/api/admin/users', headers={
            'x-admin-session': auth_headers['Authorization'].split(' ', 1)[1],
        })

        assert anonymous.status_code == 401
        assert owner.status_code == 401


class TestAdminUsers:
    """Test user administration"""

    @pytest.mark.asyncio
    async def test_list_users_with_usage(self, client: AsyncClient, storage, test_user, admin_headers):
        form = await make_form(storage, test_user)
        await storage.create_response({'form_id': form.id, 'data': {'Name': 'A'}})

        response = await client.get('/api/admin/users', headers=admin_headers)

        assert response.status_code == 200
        (summary,) = response.json()
        assert summary['id'] == test_user.id
        assert summary['formsCount'] == 1
        assert summary['storageUsedKb'] > 0
        assert 'passwordHash' not in summary

    @pytest.mark.asyncio
    async def test_suspend_blocks_form_creation(self, client: AsyncClient, test_user, admin_headers):
        response = await client.patch(
            f'/api/admin/users/{test_user.id}',
            headers=admin_headers,
            json={'status': 'suspended'},
        )

        assert response.status_code == 200
        assert response.json()['status'] == 'suspended'

        blocked = await client.post('/api/forms', headers=auth_headers_for(test_user), json=form_payload())
        assert blocked.status_code == 403

        await client.patch(f'/api/admin/users/{test_user.id}', headers=admin_headers, json={'status': 'active'})
        allowed = await client.post('/api/forms', headers=auth_headers_for(test_user), json=form_payload())
        assert allowed.status_code == 201

    @pytest.mark.asyncio
    async def test_suspended_user_keeps_read_access(self, client: AsyncClient, storage, test_user, admin_headers):
        form = await make_form(storage, test_user)
        await client.patch(f'/api/admin/users/{test_user.id}', headers=admin_headers, json={'status': 'suspended'})

        listing = await client.get('/api/forms', headers=auth_headers_for(test_user))
        responses = await client.get(f'/api/forms/{form.id}/responses', headers=auth_headers_for(test_user))

        assert listing.status_code == 200
        assert responses.status_code == 200

    @pytest.mark.asyncio
    async def test_set_limits(self, client: AsyncClient, test_user, admin_headers):
        response = await client.patch(
            f'/api/admin/users/{test_user.id}',
            headers=admin_headers,
            json={'formLimit': 3, 'storageLimit': 2048},
        )

        assert response.status_code == 200
        assert response.json()['formLimit'] == 3
        assert response.json()['storageLimit'] == 2048

    @pytest.mark.asyncio
    async def test_negative_limit_rejected(self, client: AsyncClient, test_user, admin_headers):
        response = await client.patch(
            f'/api/admin/users/{test_user.id}',
            headers=admin_headers,
            json={'formLimit': -1},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, client: AsyncClient, test_user, admin_headers):
        response = await client.patch(f'/api/admin/users/{test_user.id}', headers=admin_headers, json={})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_missing_user(self, client: AsyncClient, admin_headers):
        response = await client.patch('/api/admin/users/missing', headers=admin_headers, json={'formLimit': 3})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_platform_stats(self, client: AsyncClient, storage, admin_headers):
        first = await make_user(storage)
        second = await make_user(storage)
        form = await make_form(storage, first)
        await make_form(storage, second)
        for _ in range(3):
            await storage.create_response({'form_id': form.id, 'data': {}})

        response = await client.get('/api/admin/stats', headers=admin_headers)

        assert response.json() == {'totalUsers': 2, 'totalForms': 2, 'totalResponses': 3}
