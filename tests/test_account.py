"""
Tests for the account editor API and storage setup endpoints.
"""
import io

import pytest

from extensions import db
from models import Image, User
from utils.storage import StorageError
from utils.security import verify_password


def test_get_account(auth_client, user):
    response = auth_client.get('/api/admin/account')
    assert response.status_code == 200
    body = response.get_json()
    assert body['email'] == user.email
    assert body['name'] == 'Ada Lovelace'
    assert set(body['socialLinks']) == {'github', 'linkedin', 'twitter', 'website'}


def test_update_account(auth_client, user):
    response = auth_client.put('/api/admin/account', json={
        'name': 'Ada King',
        'title': 'Analyst',
        'bio': 'Wrote the first program',
        'location': 'London',
        'profileImageUrl': 'https://cdn.example.com/ada.png',
        'socialLinks': {'github': 'https://github.com/ada', 'website': 'https://ada.dev'}
    })
    assert response.status_code == 200
    body = response.get_json()
    assert body['name'] == 'Ada King'
    assert body['socialLinks']['github'] == 'https://github.com/ada'
    assert body['socialLinks']['twitter'] == ''

    stored = db.session.get(User, user.id)
    assert stored.title == 'Analyst'
    assert stored.image == 'https://cdn.example.com/ada.png'


def test_update_account_rejects_bad_social_links(auth_client):
    response = auth_client.put('/api/admin/account', json={'socialLinks': ['github']})
    assert response.status_code == 400


def test_update_account_requires_json_object(auth_client):
    response = auth_client.put('/api/admin/account', data='nope', content_type='text/plain')
    assert response.status_code == 400


@pytest.mark.parametrize('link', [
    'javascript:alert(document.cookie)',
    ' JavaScript:alert(1)',
    'data:text/html,<script>alert(1)</script>',
    'github.com/ada',
])
def test_update_account_rejects_unsafe_social_links(auth_client, user, link):
    response = auth_client.put('/api/admin/account', json={'socialLinks': {'github': link}})
    assert response.status_code == 400
    assert 'github' in response.get_json()['error']
    assert not db.session.get(User, user.id).github_url


def test_rejected_social_link_never_reaches_public_page(auth_client, user):
    auth_client.put('/api/admin/account', json={'socialLinks': {'website': 'javascript:alert(1)'}})
    page = auth_client.get(f'/{user.id}').get_data(as_text=True)
    assert 'javascript:' not in page


def test_update_account_rejects_unsafe_profile_image(auth_client):
    response = auth_client.put('/api/admin/account', json={'profileImageUrl': 'javascript:alert(1)'})
    assert response.status_code == 400


@pytest.mark.parametrize('payload', [
    {'name': ['Ada']},
    {'bio': {'text': 'hi'}},
    {'socialLinks': {'github': 42}},
])
def test_update_account_rejects_non_string_fields(auth_client, payload):
    response = auth_client.put('/api/admin/account', json=payload)
    assert response.status_code == 400
    assert response.get_json()['error'].startswith('Fields must be strings')


def test_account_requires_login(client):
    assert client.get('/api/admin/account').status_code == 401


def test_security_requires_current_password(auth_client):
    response = auth_client.put('/api/admin/account/security', json={'newPassword': 'another-pass'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Current password is required'


def test_security_requires_a_change(auth_client):
    response = auth_client.put('/api/admin/account/security', json={'currentPassword': 'password123'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'No changes requested'


def test_security_rejects_wrong_current_password(auth_client):
    response = auth_client.put('/api/admin/account/security', json={
        'currentPassword': 'wrong-pass', 'newPassword': 'another-pass'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Current password is incorrect'


def test_security_rejects_short_password(auth_client):
    response = auth_client.put('/api/admin/account/security', json={
        'currentPassword': 'password123', 'newPassword': 'short'})
    assert response.status_code == 400


def test_security_changes_password_and_email(auth_client, user):
    response = auth_client.put('/api/admin/account/security', json={
        'currentPassword': 'password123',
        'newPassword': 'another-pass',
        'newEmail': 'Ada.King@example.com'
    })
    assert response.status_code == 200
    assert response.get_json()['email'] == 'ada.king@example.com'

    stored = db.session.get(User, user.id)
    assert verify_password('another-pass', stored.password_hash)
    assert not verify_password('password123', stored.password_hash)


def test_security_rejects_taken_email(auth_client, other_user):
    response = auth_client.put('/api/admin/account/security', json={
        'currentPassword': 'password123', 'newEmail': other_user.email})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Email already in use'


def test_security_rejects_malformed_email(auth_client, user):
    response = auth_client.put('/api/admin/account/security', json={
        'currentPassword': 'password123', 'newEmail': 'not-an-email'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid email address'
    assert db.session.get(User, user.id).email == 'ada@example.com'


@pytest.mark.parametrize('payload', [
    {'currentPassword': ['password123'], 'newPassword': 'another-pass'},
    {'currentPassword': 'password123', 'newPassword': 12345678},
    {'currentPassword': 'password123', 'newEmail': ['ada@example.com']},
])
def test_security_rejects_non_string_values(auth_client, payload):
    response = auth_client.put('/api/admin/account/security', json=payload)
    assert response.status_code == 400


@pytest.fixture
def fake_upload(monkeypatch):
    calls = []

    def upload(file_storage, key, content_type=None):
        calls.append((key, content_type))
        return f"https://test-bucket.s3.us-east-1.amazonaws.com/{key}"

    monkeypatch.setattr('blueprints.account.routes.upload_file', upload)
    return calls


def test_profile_image_upload_sets_user_image(auth_client, user, fake_upload):
    response = auth_client.post('/api/admin/account/profile-image', data={
        'file': (io.BytesIO(b'\x89PNG'), 'me.png', 'image/png'),
        'type': 'profile'
    }, content_type='multipart/form-data')

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['imageUrl'].startswith('https://test-bucket.s3.us-east-1.amazonaws.com/profile-images/')
    assert body['imageUrl'].endswith('.png')
    assert db.session.get(User, user.id).image == body['imageUrl']
    assert Image.query.count() == 1
    assert fake_upload[0][1] == 'image/png'
    assert Image.query.one().user_id == user.id


def test_company_logo_upload_leaves_profile_image(auth_client, user, fake_upload):
    response = auth_client.post('/api/admin/account/profile-image', data={
        'file': (io.BytesIO(b'\x89PNG'), 'logo.png', 'image/png'),
        'type': 'company-logo'
    }, content_type='multipart/form-data')

    assert response.status_code == 200
    assert '/company-logos/' in response.get_json()['imageUrl']
    assert not db.session.get(User, user.id).image


def test_profile_image_requires_file(auth_client, fake_upload):
    response = auth_client.post('/api/admin/account/profile-image', data={},
                                content_type='multipart/form-data')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'No file provided'


def test_profile_image_rejects_non_image(auth_client, fake_upload):
    response = auth_client.post('/api/admin/account/profile-image', data={
        'file': (io.BytesIO(b'hello'), 'notes.txt', 'text/plain')
    }, content_type='multipart/form-data')
    assert response.status_code == 400
    assert response.get_json()['error'] == 'File must be an image'
    assert fake_upload == []


def test_profile_image_storage_failure(auth_client, monkeypatch):
    def broken(file_storage, key, content_type=None):
        raise StorageError('AccessDenied')

    monkeypatch.setattr('blueprints.account.routes.upload_file', broken)
    response = auth_client.post('/api/admin/account/profile-image', data={
        'file': (io.BytesIO(b'\x89PNG'), 'me.png', 'image/png')
    }, content_type='multipart/form-data')

    assert response.status_code == 500
    assert response.get_json()['details'] == 'AccessDenied'
    assert Image.query.count() == 0


def test_s3_status(auth_client, monkeypatch):
    status = {'isConfigured': False, 'bucketName': 'test-bucket'}
    monkeypatch.setattr('blueprints.account.routes.bucket_status', lambda: status)
    response = auth_client.get('/api/admin/s3-setup')
    assert response.status_code == 200
    assert response.get_json() == status


def test_s3_configure_missing_bucket(auth_client, monkeypatch):
    monkeypatch.setattr('blueprints.account.routes.bucket_exists', lambda: False)
    response = auth_client.post('/api/admin/s3-setup')
    assert response.status_code == 400


def test_s3_configure_applies_policy(auth_client, monkeypatch):
    applied = []
    monkeypatch.setattr('blueprints.account.routes.bucket_exists', lambda: True)
    monkeypatch.setattr('blueprints.account.routes.apply_public_read_policy',
                        lambda: applied.append(True))
    response = auth_client.post('/api/admin/s3-setup')
    assert response.status_code == 200
    assert response.get_json() == {'success': True}
    assert applied == [True]


def test_admin_page_renders(auth_client):
    response = auth_client.get('/admin')
    assert response.status_code == 200
    assert b'data-entity' in response.data


def test_admin_forms_cover_every_editable_field(auth_client):
    page = auth_client.get('/admin').get_data(as_text=True)
    for field in ('tags', 'githubUrl', 'demoUrl', 'companyLogo', 'logoImageUrl'):
        assert f'name="{field}"' in page
    assert 'data-endpoint="/api/upload"' in page
    assert 'data-endpoint="/api/admin/account/profile-image"' in page
    assert 'type="reset"' not in page
