import uuid
from decimal import Decimal
from types import SimpleNamespace

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import API, OTHER_ID, OWNER_ID, auth_headers

PNG = b'\x89PNG\r\n\x1a\n' + b'0' * 128


def product_form(category, **overrides):
    form = {
        'title': 'Used iPhone 12',
        'description': 'Battery 90%',
        'price': '25000',
        'condition': 'like-new',
        'category_id': str(category.id),
    }
    form.update(overrides)
    return form


async def test_create_product_with_image(client, seed, storage):
    mobile = await seed.category('Mobile')
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile),
        files={'image': ('phone.png', PNG, 'image/png')},
        headers=auth_headers(),
    )
    assert response.status_code == 201
    body = response.json()
    assert body['message'] == 'Product listed successfully!'
    assert body['redirect_to'] == '/marketplace'

    product = body['product']
    assert product['status'] == 'available'
    assert product['user_id'] == str(OWNER_ID)
    assert product['category'] == 'Mobile'
    assert Decimal(product['price']) == Decimal('25000')

    [path] = storage.objects
    assert path.startswith(f'{OWNER_ID}/') and path.endswith('.png')
    assert storage.objects[path] == PNG
    assert product['image_url'] == storage.public_url(path)


async def test_create_product_without_image(client, seed, storage):
    mobile = await seed.category('Mobile')
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile),
        headers=auth_headers(),
    )
    assert response.status_code == 201
    assert response.json()['product']['image_url'] is None
    assert storage.objects == {}


async def test_create_requires_sign_in(client, seed):
    mobile = await seed.category('Mobile')
    response = await client.post(
        f'{API}/products/', data=product_form(mobile)
    )
    assert response.status_code == 401
    assert response.json() == {
        'success': False,
        'detail': 'Please sign in to add products',
        'redirect_to': '/auth',
    }


async def test_expired_token_counts_as_anonymous(client, seed):
    mobile = await seed.category('Mobile')
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile),
        headers=auth_headers(expires_in=-60),
    )
    assert response.status_code == 401


async def test_create_rejects_invalid_form(client, seed):
    mobile = await seed.category('Mobile')
    for overrides in (
        {'price': '-5'},
        {'price': '0'},
        {'condition': 'broken'},
        {'title': '   '},
    ):
        response = await client.post(
            f'{API}/products/',
            data=product_form(mobile, **overrides),
            headers=auth_headers(),
        )
        assert response.status_code == 422, overrides

    listed = await client.get(f'{API}/products/')
    assert listed.json() == []


async def test_create_rejects_unknown_category(client, seed):
    await seed.category('Mobile')
    missing = SimpleNamespace(id=uuid.uuid4())
    response = await client.post(
        f'{API}/products/',
        data=product_form(missing),
        headers=auth_headers(),
    )
    assert response.status_code == 400
    assert response.json()['detail'] == 'Category not found'


async def test_create_rejects_non_image_upload(client, seed, storage):
    mobile = await seed.category('Mobile')
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile),
        files={'image': ('notes.txt', b'hello', 'text/plain')},
        headers=auth_headers(),
    )
    assert response.status_code == 400
    assert storage.objects == {}


async def test_upload_failure_is_reported(client, seed, storage):
    mobile = await seed.category('Mobile')
    storage.fail_upload = True
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile),
        files={'image': ('phone.png', PNG, 'image/png')},
        headers=auth_headers(),
    )
    assert response.status_code == 502
    assert response.json()['detail'] == 'Failed to upload image'
    listed = await client.get(f'{API}/products/')
    assert listed.json() == []


async def test_failed_insert_removes_uploaded_image(
    client, seed, storage, monkeypatch
):
    mobile = await seed.category('Mobile')

    async def failing_create(model, values, db):
        raise SQLAlchemyError('insert rejected')

    monkeypatch.setattr(
        'ru_market.service.listings.create_object_model', failing_create
    )
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile),
        files={'image': ('phone.png', PNG, 'image/png')},
        headers=auth_headers(),
    )
    assert response.status_code == 502
    assert response.json()['detail'] == 'Failed to add product'
    assert storage.objects == {}
    assert len(storage.removed) == 1


async def test_owner_sees_edit_controls(client, seed):
    product = await seed.product('Desk lamp')
    response = await client.get(
        f'{API}/products/{product.id}', headers=auth_headers(OWNER_ID)
    )
    assert response.status_code == 200
    body = response.json()
    assert body['controls'] == {
        'can_edit': True, 'can_delete': True, 'can_reveal_contact': False
    }
    assert body['contact'] is None


async def test_viewer_reveals_contact_on_request(client, seed):
    await seed.profile(OWNER_ID, full_name='Rahim', phone='+8801700000000')
    product = await seed.product('Desk lamp')

    hidden = await client.get(
        f'{API}/products/{product.id}', headers=auth_headers(OTHER_ID)
    )
    body = hidden.json()
    assert body['controls']['can_reveal_contact'] is True
    assert body['controls']['can_edit'] is False
    assert body['seller_name'] == 'Rahim'
    assert body['contact'] is None

    shown = await client.get(
        f'{API}/products/{product.id}', params={'show_contact': True}
    )
    assert shown.json()['contact'] == {
        'full_name': 'Rahim', 'phone': '+8801700000000'
    }


async def test_seller_without_profile_is_unknown(client, seed):
    product = await seed.product('Desk lamp')
    response = await client.get(
        f'{API}/products/{product.id}', params={'show_contact': True}
    )
    body = response.json()
    assert body['seller_name'] == 'Unknown'
    assert body['contact'] == {'full_name': 'Unknown', 'phone': None}


async def test_missing_product_redirects_to_marketplace(client):
    response = await client.get(f'{API}/products/{uuid.uuid4()}')
    assert response.status_code == 404
    assert response.json()['detail'] == 'Product not found'
    assert response.json()['redirect_to'] == '/marketplace'


async def test_update_by_owner(client, seed):
    mobile = await seed.category('Mobile')
    book = await seed.category('Book')
    product = await seed.product('Old title', category=mobile)
    # прогреваем кэш, обновление должно его сбросить
    await client.get(f'{API}/products/{product.id}')

    response = await client.put(
        f'{API}/products/{product.id}',
        data=product_form(book, title='New title', price='150.50'),
        headers=auth_headers(OWNER_ID),
    )
    assert response.status_code == 200
    body = response.json()
    assert body['message'] == 'Product updated successfully!'
    assert body['redirect_to'] == f'/product/{product.id}'
    assert body['product']['category'] == 'Book'

    detail = await client.get(f'{API}/products/{product.id}')
    assert detail.json()['product']['title'] == 'New title'
    assert Decimal(detail.json()['product']['price']) == Decimal('150.50')


async def test_update_replaces_image(client, seed, storage):
    mobile = await seed.category('Mobile')
    old_url = storage.public_url(f'{OWNER_ID}/1.png')
    storage.objects[f'{OWNER_ID}/1.png'] = b'old'
    product = await seed.product(
        'Phone', category=mobile, image_url=old_url
    )

    response = await client.put(
        f'{API}/products/{product.id}',
        data=product_form(mobile),
        files={'image': ('new.png', PNG, 'image/png')},
        headers=auth_headers(OWNER_ID),
    )
    assert response.status_code == 200
    new_url = response.json()['product']['image_url']
    assert new_url != old_url
    assert storage.removed == [f'{OWNER_ID}/1.png']
    assert list(storage.objects) == [storage.path_from_public_url(new_url)]


async def test_update_by_other_user_is_forbidden(client, seed):
    mobile = await seed.category('Mobile')
    product = await seed.product('Phone', category=mobile)
    response = await client.put(
        f'{API}/products/{product.id}',
        data=product_form(mobile, title='Hijacked'),
        headers=auth_headers(OTHER_ID),
    )
    assert response.status_code == 403
    assert response.json()['detail'] == (
        'You can only update your own products'
    )


async def test_mark_sold_hides_product_from_catalog(client, seed):
    product = await seed.product('Phone')
    response = await client.post(
        f'{API}/products/{product.id}/sold', headers=auth_headers(OWNER_ID)
    )
    assert response.status_code == 200
    assert response.json()['product']['status'] == 'sold'

    catalog = await client.get(f'{API}/marketplace/')
    assert catalog.json()['items'] == []


async def test_delete_requires_confirmation(client, seed):
    product = await seed.product('Phone')
    response = await client.delete(
        f'{API}/products/{product.id}', headers=auth_headers(OWNER_ID)
    )
    assert response.status_code == 400
    assert response.json()['detail'] == (
        'Are you sure you want to delete this product?'
    )
    still_there = await client.get(f'{API}/products/{product.id}')
    assert still_there.status_code == 200


async def test_delete_by_owner_removes_image(client, seed, storage):
    image_url = storage.public_url(f'{OWNER_ID}/1.png')
    storage.objects[f'{OWNER_ID}/1.png'] = b'img'
    product = await seed.product('Phone', image_url=image_url)
    await client.get(f'{API}/products/{product.id}')

    response = await client.delete(
        f'{API}/products/{product.id}',
        params={'confirm': True},
        headers=auth_headers(OWNER_ID),
    )
    assert response.status_code == 200
    assert response.json()['message'] == 'Product deleted successfully'
    assert response.json()['redirect_to'] == '/marketplace'
    assert storage.objects == {}

    gone = await client.get(f'{API}/products/{product.id}')
    assert gone.status_code == 404


async def test_delete_by_other_user_is_forbidden(client, seed):
    product = await seed.product('Phone')
    response = await client.delete(
        f'{API}/products/{product.id}',
        params={'confirm': True},
        headers=auth_headers(OTHER_ID),
    )
    assert response.status_code == 403
    assert response.json()['detail'] == (
        'You can only delete your own products'
    )


async def test_blank_description_is_stored_as_none(client, seed):
    mobile = await seed.category('Mobile')
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile, description='   '),
        headers=auth_headers(),
    )
    assert response.status_code == 201
    assert response.json()['product']['description'] is None


async def test_oversized_image_is_rejected(
    client, seed, storage, monkeypatch
):
    mobile = await seed.category('Mobile')
    monkeypatch.setattr('ru_market.config.MAX_IMAGE_SIZE', len(PNG) - 1)
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile),
        files={'image': ('phone.png', PNG, 'image/png')},
        headers=auth_headers(),
    )
    assert response.status_code == 413
    assert storage.objects == {}
    listed = await client.get(f'{API}/products/')
    assert listed.json() == []


async def test_failed_update_removes_new_image_and_keeps_old(
    client, seed, storage, monkeypatch
):
    mobile = await seed.category('Mobile')
    old_path = f'{OWNER_ID}/1.png'
    storage.objects[old_path] = b'old'
    product = await seed.product(
        'Phone', category=mobile, image_url=storage.public_url(old_path)
    )

    async def failing_update(model, object_model, values, db):
        raise SQLAlchemyError('update rejected')

    monkeypatch.setattr(
        'ru_market.service.listings.update_object_model', failing_update
    )
    response = await client.put(
        f'{API}/products/{product.id}',
        data=product_form(mobile, title='New title'),
        files={'image': ('new.png', PNG, 'image/png')},
        headers=auth_headers(OWNER_ID),
    )
    assert response.status_code == 502
    assert response.json()['detail'] == 'Failed to update product.'
    assert list(storage.objects) == [old_path]
    assert len(storage.removed) == 1
    assert storage.removed[0] != old_path


async def test_detail_backend_failure_is_reported(client, monkeypatch):

    async def failing_scalars(self, *args, **kwargs):
        raise SQLAlchemyError('connection lost')

    monkeypatch.setattr(AsyncSession, 'scalars', failing_scalars)
    response = await client.get(f'{API}/products/{uuid.uuid4()}')
    assert response.status_code == 502
    assert response.json() == {
        'success': False,
        'detail': 'Failed to load product',
        'redirect_to': None,
    }


async def test_uncaught_database_error_keeps_json_shape(
    client, seed, monkeypatch
):
    mobile = await seed.category('Mobile')

    async def failing_scalars(self, *args, **kwargs):
        raise SQLAlchemyError('connection lost')

    # проверка категории не перехватывает ошибки базы сама
    monkeypatch.setattr(AsyncSession, 'scalars', failing_scalars)
    response = await client.post(
        f'{API}/products/',
        data=product_form(mobile),
        headers=auth_headers(),
    )
    assert response.status_code == 502
    assert response.headers['content-type'] == 'application/json'
    assert response.json() == {
        'success': False,
        'detail': 'Service is temporarily unavailable',
        'redirect_to': None,
    }
