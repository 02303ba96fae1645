import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Настройки должны попасть в окружение до импорта приложения
TEST_JWT_SECRET = 'test-secret-key-with-enough-length-for-hs256'
os.environ['SUPABASE_URL'] = 'http://storage.test'
os.environ['SUPABASE_ANON_KEY'] = 'anon-key'
os.environ['SUPABASE_JWT_SECRET'] = TEST_JWT_SECRET
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['LOGGER_FILE'] = os.path.join(
    tempfile.gettempdir(), 'ru_market_tests.log'
)

import jwt  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, async_sessionmaker, create_async_engine
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from ru_market.cache import entity_cache  # noqa: E402
from ru_market.database import Base  # noqa: E402
from ru_market.db_depends import get_async_db  # noqa: E402
from ru_market.main import app, app_v1  # noqa: E402
from ru_market.models import (  # noqa: E402
    Category, Product, Profile, Review
)
from ru_market.service.identity import (  # noqa: E402
    IdentityError, IdentityService, get_identity
)
from ru_market.service.storage import (  # noqa: E402
    ObjectStorage, StorageError, get_storage
)

API = '/api/v1'
OWNER_ID = uuid.UUID('11111111-1111-4111-8111-111111111111')
OTHER_ID = uuid.UUID('22222222-2222-4222-8222-222222222222')


class FakeStorage(ObjectStorage):
    """Хранилище в памяти вместо REST API хостинга"""

    def __init__(self):
        super().__init__()
        self.objects = {}
        self.removed = []
        self.fail_upload = False

    async def upload(self, path, data, content_type, access_token):
        if self.fail_upload:
            raise StorageError('storage is down')
        self.objects[path] = data
        return self.public_url(path)

    async def remove(self, paths, access_token):
        for path in paths:
            self.objects.pop(path, None)
            self.removed.append(path)


class FakeIdentity(IdentityService):

    def __init__(self):
        super().__init__()
        self.signed_out = []
        self.fail = False

    async def sign_out(self, access_token):
        if self.fail:
            raise IdentityError('identity service is down')
        self.signed_out.append(access_token)


def make_token(
    user_id=OWNER_ID, email='seller@ru.ac.bd', expires_in=3600
) -> str:
    return jwt.encode(
        {
            'sub': str(user_id),
            'email': email,
            'aud': 'authenticated',
            'exp': datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        },
        TEST_JWT_SECRET,
        algorithm='HS256',
    )


def auth_headers(user_id=OWNER_ID, **kwargs) -> dict:
    return {'Authorization': f'Bearer {make_token(user_id, **kwargs)}'}


class Seeder:
    """Заполняет тестовую базу напрямую, минуя API"""

    def __init__(self, session_maker):
        self.session_maker = session_maker
        self._tick = 0

    async def _add(self, obj):
        async with self.session_maker() as session:
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
        return obj

    async def category(self, name='Mobile') -> Category:
        return await self._add(Category(name=name))

    async def product(
        self,
        title='Used phone',
        category=None,
        user_id=OWNER_ID,
        status='available',
        price='100.00',
        image_url=None,
        created_at=None,
    ) -> Product:
        if created_at is None:
            # каждый следующий товар новее предыдущего
            self._tick += 1
            created_at = (
                datetime(2024, 1, 1, tzinfo=timezone.utc)
                + timedelta(minutes=self._tick)
            )
        return await self._add(Product(
            title=title,
            description=f'{title} in fine shape',
            price=Decimal(price),
            condition='good',
            category_id=category.id if category else None,
            image_url=image_url,
            user_id=user_id,
            status=status,
            created_at=created_at,
        ))

    async def profile(self, user_id=OWNER_ID, full_name='Rahim', phone=None):
        return await self._add(
            Profile(id=user_id, full_name=full_name, phone=phone)
        )

    async def review(self, comment, rating=5, user_id=OWNER_ID, minutes=0):
        return await self._add(Review(
            user_id=user_id,
            rating=rating,
            comment=comment,
            created_at=(
                datetime(2024, 1, 1, tzinfo=timezone.utc)
                + timedelta(minutes=minutes)
            ),
        ))


@pytest.fixture(autouse=True)
def clear_cache():
    entity_cache.clear()
    yield
    entity_cache.clear()


@pytest.fixture
async def session_maker():
    engine = create_async_engine(
        'sqlite+aiosqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(
        engine, expire_on_commit=False, class_=AsyncSession
    )
    await engine.dispose()


@pytest.fixture
def seed(session_maker):
    return Seeder(session_maker)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
async def client(session_maker, storage, identity):

    async def override_get_async_db():
        async with session_maker() as session:
            yield session

    app_v1.dependency_overrides[get_async_db] = override_get_async_db
    app_v1.dependency_overrides[get_storage] = lambda: storage
    app_v1.dependency_overrides[get_identity] = lambda: identity
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url='http://localhost'
    ) as async_client:
        yield async_client
    app_v1.dependency_overrides.clear()
