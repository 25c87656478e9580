"""
Unit Tests for Responses API Endpoints
Tests for: public submission, single-submission forms, owner edits, WhatsApp share
"""
import pytest
from urllib.parse import unquote
from httpx import AsyncClient

from conftest import make_form, auth_headers_for


class TestSubmitResponse:
    """Test public submissions"""

    @pytest.mark.asyncio
    async def test_submit_anonymously(self, client: AsyncClient, storage, test_user, test_form):
        """Test anyone can submit to a form and data is stored as sent"""
        payload = {'formId': test_form.id, 'data': {'Name': 'Meera', 'Agree': True, 'Extra': 5}}

        response = await client.post('/api/responses', json=payload)

        assert response.status_code == 201
        data = response.json()
        assert data['formId'] == test_form.id
        assert data['data'] == {'Name': 'Meera', 'Agree': True, 'Extra': 5}
        assert 'submittedAt' in data
        assert 'respondentKey' not in data

        assert (await storage.get_user(test_user.id)).total_responses == 1

    @pytest.mark.asyncio
    async def test_submit_to_missing_form(self, client: AsyncClient):
        response = await client.post('/api/responses', json={'formId': 'missing', 'data': {}})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_single_submission_form_rejects_repeat(self, client: AsyncClient, storage, test_user):
        """Test allow_editing=false accepts one submission per respondent"""
        form = await make_form(storage, test_user, allow_editing=False)
        headers = {'X-Respondent-Id': 'browser-123'}
        payload = {'formId': form.id, 'data': {'Name': 'A'}}

        first = await client.post('/api/responses', json=payload, headers=headers)
        second = await client.post('/api/responses', json=payload, headers=headers)
        other = await client.post('/api/responses', json=payload, headers={'X-Respondent-Id': 'browser-456'})

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()['error']['code'] == 'DUPLICATE_SUBMISSION'
        assert other.status_code == 201

    @pytest.mark.asyncio
    async def test_editable_form_accepts_repeat(self, client: AsyncClient, test_form):
        headers = {'X-Respondent-Id': 'browser-123'}
        payload = {'formId': test_form.id, 'data': {'Name': 'A'}}

        first = await client.post('/api/responses', json=payload, headers=headers)
        second = await client.post('/api/responses', json=payload, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 201

    @pytest.mark.asyncio
    async def test_get_single_response_publicly(self, client: AsyncClient, storage, test_form):
        """Test the confirmation page can read a response by id"""
        stored = await storage.create_response({
            'form_id': test_form.id,
            'data': {'Name': 'A'},
            'respondent_key': 'secret-key',
        })

        response = await client.get(f'/api/responses/{stored.id}')

        assert response.status_code == 200
        assert response.json()['data'] == {'Name': 'A'}
        assert 'respondentKey' not in response.json()

    @pytest.mark.asyncio
    async def test_get_missing_response(self, client: AsyncClient):
        response = await client.get('/api/responses/missing')

        assert response.status_code == 404


class TestManageResponses:
    """Test owner edits and deletions"""

    @pytest.mark.asyncio
    async def test_owner_updates_response(self, client: AsyncClient, storage, test_form, auth_headers):
        stored = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'A'}})

        response = await client.patch(
            f'/api/responses/{stored.id}',
            headers=auth_headers,
            json={'data': {'Name': 'B', 'Agree': False}},
        )

        assert response.status_code == 200
        assert response.json()['data'] == {'Name': 'B', 'Agree': False}

    @pytest.mark.asyncio
    async def test_other_user_cannot_update(self, client: AsyncClient, storage, test_form, other_user):
        stored = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'A'}})

        response = await client.patch(
            f'/api/responses/{stored.id}',
            headers=auth_headers_for(other_user),
            json={'data': {'Name': 'B'}},
        )

        assert response.status_code == 403
        assert (await storage.get_response(stored.id)).data == {'Name': 'A'}

    @pytest.mark.asyncio
    async def test_owner_deletes_response(self, client: AsyncClient, storage, test_user, test_form, auth_headers):
        stored = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'A'}})

        response = await client.delete(f'/api/responses/{stored.id}', headers=auth_headers)

        assert response.status_code == 204
        assert await storage.get_response(stored.id) is None
        assert (await storage.get_user(test_user.id)).total_responses == 0

    @pytest.mark.asyncio
    async def test_delete_requires_auth(self, client: AsyncClient, storage, test_form):
        stored = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'A'}})

        response = await client.delete(f'/api/responses/{stored.id}')

        assert response.status_code == 401


class TestWhatsappShare:
    """Test WhatsApp share message generation"""

    @pytest.mark.asyncio
    async def test_share_with_template(self, client: AsyncClient, storage, test_user):
        form = await make_form(
            storage,
            test_user,
            output_formats=['thank_you', 'whatsapp'],
            whatsapp_format='Hello {{Name}}, agreed: {{ Agree }}',
        )
        stored = await storage.create_response({'form_id': form.id, 'data': {'Name': 'Kiran', 'Agree': True}})

        response = await client.get(f'/api/responses/{stored.id}/whatsapp', params={'phone': '+91 98765-43210'})

        assert response.status_code == 200
        data = response.json()
        assert data['message'] == 'Hello Kiran, agreed: Yes'
        assert data['link'].startswith('https://wa.me/919876543210?text=')
        assert unquote(data['link'].split('text=', 1)[1]) == data['message']

    @pytest.mark.asyncio
    async def test_share_default_message(self, client: AsyncClient, storage, test_user):
        form = await make_form(storage, test_user, title='Feedback', output_formats=['whatsapp'])
        stored = await storage.create_response({'form_id': form.id, 'data': {'name': 'Kiran'}})

        response = await client.get(f'/api/responses/{stored.id}/whatsapp')

        message = response.json()['message']
        assert message.startswith('I just filled out the "Feedback" form:')
        assert 'Name: Kiran' in message
        assert message.endswith(f'http://forms.test/s/{form.id}')
        assert response.json()['link'].startswith('https://wa.me/?text=')

    @pytest.mark.asyncio
    async def test_share_not_enabled(self, client: AsyncClient, storage, test_form):
        stored = await storage.create_response({'form_id': test_form.id, 'data': {'Name': 'A'}})

        response = await client.get(f'/api/responses/{stored.id}/whatsapp')

        assert response.status_code == 400
