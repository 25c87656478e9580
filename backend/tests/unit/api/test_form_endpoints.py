"""
Unit Tests for Forms API Endpoints
Tests for: form CRUD, ownership, visibility, quotas, suspension, response back-fill
"""
import pytest
from httpx import AsyncClient

from conftest import fake, make_user, make_form, form_payload, auth_headers_for


class TestCreateForm:
    """Test form creation"""

    @pytest.mark.asyncio
    async def test_create_form(self, client: AsyncClient, test_user, auth_headers):
        """Test creating a form applies defaults"""
        response = await client.post('/api/forms', headers=auth_headers, json=form_payload(title='Event RSVP'))

        assert response.status_code == 201
        data = response.json()
        assert data['title'] == 'Event RSVP'
        assert data['userId'] == test_user.id
        assert data['status'] == 'Active'
        assert data['visibility'] == 'public'
        assert data['outputFormats'] == ['thank_you']
        assert data['confirmationStyle'] == 'table'
        assert data['allowEditing'] is True
        assert [f['id'] for f in data['fields']] == ['f1', 'f2', 'f3']

    @pytest.mark.asyncio
    async def test_create_form_updates_metrics(self, client: AsyncClient, storage, test_user, auth_headers):
        await client.post('/api/forms', headers=auth_headers, json=form_payload())

        assert (await storage.get_user(test_user.id)).total_forms == 1

    @pytest.mark.asyncio
    async def test_create_form_requires_auth(self, client: AsyncClient):
        response = await client.post('/api/forms', json=form_payload())

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_form_empty_title(self, client: AsyncClient, auth_headers):
        response = await client.post('/api/forms', headers=auth_headers, json=form_payload(title=''))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_form_duplicate_field_ids(self, client: AsyncClient, auth_headers):
        """Test field ids must be unique within a form"""
        fields = [
            {'id': 'f1', 'type': 'text', 'label': 'Name'},
            {'id': 'f1', 'type': 'email', 'label': 'Email'},
        ]

        response = await client.post('/api/forms', headers=auth_headers, json=form_payload(fields=fields))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_form_unknown_field_type(self, client: AsyncClient, auth_headers):
        fields = [{'id': 'f1', 'type': 'signature', 'label': 'Sign'}]

        response = await client.post('/api/forms', headers=auth_headers, json=form_payload(fields=fields))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_form_limit_enforced(self, client: AsyncClient, storage):
        """Test creation is blocked once the owner reaches form_limit"""
        user = await make_user(storage, form_limit=2)
        headers = auth_headers_for(user)

        for _ in range(2):
            created = await client.post('/api/forms', headers=headers, json=form_payload())
            assert created.status_code == 201

        response = await client.post('/api/forms', headers=headers, json=form_payload())

        assert response.status_code == 403
        error = response.json()['error']
        assert error['code'] == 'FORM_LIMIT_EXCEEDED'
        assert error['details'] == {'current': 2, 'limit': 2}

    @pytest.mark.asyncio
    async def test_suspended_user_cannot_create(self, client: AsyncClient, storage):
        user = await make_user(storage, status='suspended')

        response = await client.post('/api/forms', headers=auth_headers_for(user), json=form_payload())

        assert response.status_code == 403
        assert response.json()['error']['code'] == 'ACCOUNT_SUSPENDED'


class TestReadForms:
    """Test listing and reading forms"""

    @pytest.mark.asyncio
    async def test_list_forms_only_own(self, client: AsyncClient, storage, test_user, other_user, auth_headers):
        mine = await make_form(storage, test_user)
        await make_form(storage, other_user)

        response = await client.get('/api/forms', headers=auth_headers)

        assert response.status_code == 200
        assert [f['id'] for f in response.json()] == [mine.id]

    @pytest.mark.asyncio
    async def test_list_forms_most_recently_updated_first(self, client: AsyncClient, storage, test_user, auth_headers):
        first = await make_form(storage, test_user, title='First')
        second = await make_form(storage, test_user, title='Second')
        await storage.update_form(first.id, {'title': 'First (edited)'})

        response = await client.get('/api/forms', headers=auth_headers)

        assert [f['id'] for f in response.json()] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_get_public_form_anonymously(self, client: AsyncClient, test_form):
        """Test public forms are readable without identity"""
        response = await client.get(f'/api/forms/{test_form.id}')

        assert response.status_code == 200
        assert response.json()['title'] == test_form.title

    @pytest.mark.asyncio
    async def test_get_missing_form(self, client: AsyncClient):
        response = await client.get('/api/forms/does-not-exist')

        assert response.status_code == 404
        assert response.json()['error']['code'] == 'FORM_NOT_FOUND'

    @pytest.mark.asyncio
    async def test_private_form_hidden_from_anonymous(self, client: AsyncClient, storage, test_user):
        form = await make_form(storage, test_user, visibility='private')

        response = await client.get(f'/api/forms/{form.id}')

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_private_form_visible_to_owner(self, client: AsyncClient, storage, test_user, auth_headers):
        form = await make_form(storage, test_user, visibility='private')

        response = await client.get(f'/api/forms/{form.id}', headers=auth_headers)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_private_form_hidden_from_other_owner(self, client: AsyncClient, storage, test_user, other_user):
        form = await make_form(storage, test_user, visibility='private')

        response = await client.get(f'/api/forms/{form.id}', headers=auth_headers_for(other_user))

        assert response.status_code == 403


class TestUpdateForm:
    """Test form edits"""

    @pytest.mark.asyncio
    async def test_partial_update(self, client: AsyncClient, test_form, auth_headers):
        """Test only supplied attributes change"""
        response = await client.patch(f'/api/forms/{test_form.id}', headers=auth_headers, json={
            'status': 'Draft',
            'whatsappFormat': 'Hi {{Name}}',
        })

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'Draft'
        assert data['whatsappFormat'] == 'Hi {{Name}}'
        assert data['title'] == test_form.title
        assert len(data['fields']) == len(test_form.fields)

    @pytest.mark.asyncio
    async def test_null_required_attribute_is_ignored(self, client: AsyncClient, test_form, auth_headers):
        response = await client.patch(f'/api/forms/{test_form.id}', headers=auth_headers, json={
            'title': None,
            'confirmationText': 'Thanks!',
        })

        assert response.status_code == 200
        assert response.json()['title'] == test_form.title
        assert response.json()['confirmationText'] == 'Thanks!'

    @pytest.mark.asyncio
    async def test_update_other_users_form(self, client: AsyncClient, test_form, other_user):
        response = await client.patch(
            f'/api/forms/{test_form.id}',
            headers=auth_headers_for(other_user),
            json={'title': 'Hijacked'},
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_update_missing_form(self, client: AsyncClient, auth_headers):
        response = await client.patch('/api/forms/missing', headers=auth_headers, json={'title': 'x'})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_suspended_owner_cannot_edit(self, client: AsyncClient, storage, test_user, test_form, auth_headers):
        await storage.update_user(test_user.id, {'status': 'suspended'})

        response = await client.patch(f'/api/forms/{test_form.id}', headers=auth_headers, json={'title': 'New'})

        assert response.status_code == 403
        assert response.json()['error']['code'] == 'ACCOUNT_SUSPENDED'

    @pytest.mark.asyncio
    async def test_new_fields_backfill_existing_responses(self, client: AsyncClient, storage, test_form, auth_headers):
        """Test adding fields adds defaults to stored responses without touching existing values"""
        stored = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'Ravi', 'Agree': True}})
        fields = [f.model_dump() for f in test_form.fields] + [
            {'id': 'f9', 'type': 'checkbox', 'label': 'Newsletter'},
            {'id': 'f10', 'type': 'text', 'label': 'City'},
        ]

        response = await client.patch(f'/api/forms/{test_form.id}', headers=auth_headers, json={'fields': fields})

        assert response.status_code == 200
        data = (await storage.get_response(stored.id)).data
        assert data == {'Name': 'Ravi', 'Agree': True, 'Newsletter': False, 'City': ''}

    @pytest.mark.asyncio
    async def test_removed_fields_keep_response_data(self, client: AsyncClient, storage, test_form, auth_headers):
        stored = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'Ravi', 'Agree': True}})
        fields = [{'id': 'f1', 'type': 'text', 'label': 'Name'}]

        await client.patch(f'/api/forms/{test_form.id}', headers=auth_headers, json={'fields': fields})

        assert (await storage.get_response(stored.id)).data == {'Name': 'Ravi', 'Agree': True}


class TestDeleteForm:
    """Test form deletion"""

    @pytest.mark.asyncio
    async def test_delete_form_removes_responses(self, client: AsyncClient, storage, test_form, auth_headers):
        stored = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'A'}})

        response = await client.delete(f'/api/forms/{test_form.id}', headers=auth_headers)

        assert response.status_code == 204
        assert await storage.get_form(test_form.id) is None
        assert await storage.get_response(stored.id) is None

    @pytest.mark.asyncio
    async def test_suspended_owner_can_delete(self, client: AsyncClient, storage, test_user, test_form, auth_headers):
        await storage.update_user(test_user.id, {'status': 'suspended'})

        response = await client.delete(f'/api/forms/{test_form.id}', headers=auth_headers)

        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_delete_other_users_form(self, client: AsyncClient, storage, test_form, other_user):
        response = await client.delete(f'/api/forms/{test_form.id}', headers=auth_headers_for(other_user))

        assert response.status_code == 403
        assert await storage.get_form(test_form.id) is not None


class TestFormResponses:
    """Test owner-side response listing, stats and lookup data"""

    @pytest.mark.asyncio
    async def test_stats_and_responses(self, client: AsyncClient, storage, test_form, auth_headers):
        for name in ('A', 'B', 'C'):
            await storage.create_response({'form_id': test_form.id, 'data': {'Name': name}})

        stats = await client.get(f'/api/forms/{test_form.id}/stats', headers=auth_headers)
        listing = await client.get(f'/api/forms/{test_form.id}/responses', headers=auth_headers)

        assert stats.json() == {'responseCount': 3}
        assert len(listing.json()) == 3

    @pytest.mark.asyncio
    async def test_responses_newest_first(self, client: AsyncClient, storage, test_form, auth_headers):
        first = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'first'}})
        second = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'second'}})

        listing = await client.get(f'/api/forms/{test_form.id}/responses', headers=auth_headers)

        assert [r['id'] for r in listing.json()] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_responses_owner_only(self, client: AsyncClient, test_form, other_user):
        response = await client.get(f'/api/forms/{test_form.id}/responses', headers=auth_headers_for(other_user))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_form_data_owner_only(self, client: AsyncClient, storage, test_form, auth_headers, other_user):
        await storage.create_response({'form_id': test_form.id, 'data': {'Name': fake.name()}})

        own = await client.get(f'/api/forms/{test_form.id}/data', headers=auth_headers)
        foreign = await client.get(f'/api/forms/{test_form.id}/data', headers=auth_headers_for(other_user))

        assert own.status_code == 200
        assert len(own.json()) == 1
        assert foreign.status_code == 403
