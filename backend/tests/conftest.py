"""
FormFlow - Test Configuration and Fixtures
"""
import os
from datetime import datetime, timedelta
from typing import AsyncGenerator, Dict
import pytest
from httpx import AsyncClient, ASGITransport
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['ADMIN_USERNAME'] = 'admin'
os.environ['ADMIN_PASSWORD'] = 'test-admin-password'
os.environ['SMTP_USER'] = ''
os.environ['SMTP_PASSWORD'] = ''
os.environ['APP_URL'] = 'http://forms.test'

from formflow.main import app
from formflow.core.database import drop_db
from formflow.core.security import get_password_hash, create_access_token
from formflow.schemas.user import User
from formflow.schemas.form import Form
from formflow.storage.factory import get_storage
from formflow.storage.sql_storage import SqlStorage

fake = Faker()

TEST_PASSWORD = 'testpassword123'
TEST_DATABASE_URL = 'sqlite+aiosqlite:///:memory:'


@pytest.fixture(scope='function')
async def storage() -> AsyncGenerator[SqlStorage, None]:
    """Fresh in-memory relational store for each test"""
    store = SqlStorage(TEST_DATABASE_URL)
    await store.connect()
    yield store
    await drop_db(store.engine)
    await store.close()


@pytest.fixture
async def client(storage: SqlStorage) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with storage override"""
    app.dependency_overrides[get_storage] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(storage: SqlStorage, **overrides) -> User:
    """Insert a user directly; verified and active unless overridden"""
    data = {
        'email': fake.unique.email().lower(),
        'password_hash': get_password_hash(TEST_PASSWORD),
        'first_name': fake.first_name(),
        'last_name': fake.last_name(),
        'status': 'active',
        'email_verified': True,
        'form_limit': 10,
        'storage_limit': 10240,
    }
    data.update(overrides)
    return await storage.create_user(data)


def form_payload(**overrides) -> Dict:
    """Form creation body as the web client sends it"""
    payload = {
        'title': fake.sentence(nb_words=3),
        'fields': [
            {'id': 'f1', 'type': 'text', 'label': 'Name', 'required': True},
            {'id': 'f2', 'type': 'email', 'label': 'Email'},
            {'id': 'f3', 'type': 'checkbox', 'label': 'Subscribe'},
        ],
    }
    payload.update(overrides)
    return payload


async def make_form(storage: SqlStorage, owner: User, **overrides) -> Form:
    data = {
        'user_id': owner.id,
        'title': fake.sentence(nb_words=3),
        'fields': [
            {'id': 'f1', 'type': 'text', 'label': 'Name', 'required': True},
            {'id': 'f2', 'type': 'checkbox', 'label': 'Agree'},
        ],
        'status': 'Active',
        'visibility': 'public',
        'output_formats': ['thank_you'],
        'confirmation_style': 'table',
        'allow_editing': True,
    }
    data.update(overrides)
    return await storage.create_form(data)


def auth_headers_for(user: User) -> Dict[str, str]:
    """Bearer headers for a stored user"""
    token = create_access_token(user.id, user.email)
    return {'Authorization': f'Bearer {token}'}


def past(minutes: int = 1) -> datetime:
    return datetime.utcnow() - timedelta(minutes=minutes)


@pytest.fixture
async def test_user(storage: SqlStorage) -> User:
    """Create a verified test user"""
    return await make_user(storage)


@pytest.fixture
async def other_user(storage: SqlStorage) -> User:
    """A second, unrelated form owner"""
    return await make_user(storage)


@pytest.fixture
def auth_headers(test_user: User) -> Dict[str, str]:
    """Create authentication headers"""
    return auth_headers_for(test_user)


@pytest.fixture
async def test_form(storage: SqlStorage, test_user: User) -> Form:
    """A public form owned by test_user"""
    return await make_form(storage, test_user)
