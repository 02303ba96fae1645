from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import ru_market.constants as c
from ru_market.auth import get_current_session
from ru_market.cache import EntityCache, get_entity_cache
from ru_market.db_depends import get_async_db
from ru_market.errors import BackendError
from ru_market.filters import ProductFilter
from ru_market.models.profiles import Profile as ProfileModel
from ru_market.schemas import (
    ProfilePage,
    ProfileResult,
    ProfileUpdate,
    Profile as ProfileSchema
)
from ru_market.service.catalog import load_products
from ru_market.service.tools import (
    create_object_model,
    get_profile_or_none,
    update_object_model
)
from ru_market.session import AuthSession


router = APIRouter(
    prefix="/profile",
    tags=["profile"],
)


@router.get('/', response_model=ProfilePage)
async def get_profile(
    db: AsyncSession = Depends(get_async_db),
    session: AuthSession = Depends(get_current_session)
):
    """
    Профиль текущего пользователя и все его объявления.
    """
    profile = await get_profile_or_none(session.user_id, db)
    products = await load_products(
        db, ProductFilter(user_id=session.user_id)
    )
    return ProfilePage(
        profile=ProfileSchema.model_validate(profile) if profile else None,
        email=session.email,
        products=products,
        message=None if products else c.MESSAGE_NO_OWN_PRODUCTS
    )


@router.put('/', response_model=ProfileResult)
async def update_profile(
    profile_update: ProfileUpdate,
    db: AsyncSession = Depends(get_async_db),
    session: AuthSession = Depends(get_current_session),
    cache: EntityCache = Depends(get_entity_cache)
):
    """
    Обновляет имя и телефон; профиль создаётся, если его ещё нет.
    """
    try:
        profile = await db.get(ProfileModel, session.user_id)
        if profile is None:
            profile = await create_object_model(
                ProfileModel,
                profile_update.model_dump() | {'id': session.user_id},
                db
            )
        else:
            profile = await update_object_model(
                ProfileModel, profile, profile_update.model_dump(), db
            )
    except SQLAlchemyError as ex:
        await db.rollback()
        logger.error(f'Profile {session.user_id} update failed: {ex}')
        raise BackendError(c.MESSAGE_PROFILE_UPDATE_FAILED)
    cache.invalidate(c.CACHE_KIND_PROFILE, session.user_id)
    return ProfileResult(
        message=c.MESSAGE_PROFILE_UPDATED,
        profile=ProfileSchema.model_validate(profile)
    )
