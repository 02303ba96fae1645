from conftest import API, OWNER_ID, auth_headers


async def test_anonymous_navigation(client):
    response = await client.get(f'{API}/auth/session')
    body = response.json()
    assert body['is_authenticated'] is False
    assert body['user_id'] is None
    assert [link['href'] for link in body['links']] == [
        '/marketplace', '/auth'
    ]


async def test_signed_in_navigation(client):
    response = await client.get(
        f'{API}/auth/session', headers=auth_headers(email='me@ru.ac.bd')
    )
    body = response.json()
    assert body['is_authenticated'] is True
    assert body['user_id'] == str(OWNER_ID)
    assert body['email'] == 'me@ru.ac.bd'
    assert [link['title'] for link in body['links']] == [
        'Marketplace', 'Sell Product', 'Profile'
    ]


async def test_garbage_token_is_anonymous(client):
    response = await client.get(
        f'{API}/auth/session',
        headers={'Authorization': 'Bearer not-a-jwt'}
    )
    assert response.status_code == 200
    assert response.json()['is_authenticated'] is False


async def test_sign_out(client, identity):
    headers = auth_headers()
    response = await client.post(f'{API}/auth/sign-out', headers=headers)
    assert response.status_code == 200
    assert response.json() == {
        'success': True, 'message': 'Signed out', 'redirect_to': '/'
    }
    assert identity.signed_out == [headers['Authorization'].split()[1]]


async def test_sign_out_failure(client, identity):
    identity.fail = True
    response = await client.post(
        f'{API}/auth/sign-out', headers=auth_headers()
    )
    assert response.status_code == 502
    assert response.json()['detail'] == 'Failed to sign out'


async def test_sign_out_requires_session(client, identity):
    response = await client.post(f'{API}/auth/sign-out')
    assert response.status_code == 401
    assert identity.signed_out == []
