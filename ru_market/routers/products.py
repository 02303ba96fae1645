import uuid

from fastapi import (
    APIRouter, Depends, Query, UploadFile, File, status
)
from fastapi_filter import FilterDepends
from sqlalchemy.ext.asyncio import AsyncSession

import ru_market.constants as c
from ru_market.auth import get_session_context, require_session
from ru_market.cache import EntityCache, get_entity_cache
from ru_market.db_depends import get_async_db
from ru_market.errors import MarketError, PermissionDenied
from ru_market.filters import ProductFilter
from ru_market.schemas import (
    ListingResult,
    Notice,
    Product as ProductSchema,
    ProductCard,
    ProductControls,
    ProductCreate,
    ProductDetail,
    Profile as ProfileSchema,
    SellerContact,
)
from ru_market.service.catalog import load_products
from ru_market.service.listings import (
    create_listing,
    delete_listing,
    mark_listing_sold,
    update_listing
)
from ru_market.service.storage import ObjectStorage, get_storage
from ru_market.service.tools import get_product_or_404, get_profile_or_none
from ru_market.service.validators import validate_category
from ru_market.session import SessionContext


router = APIRouter(
    prefix="/products",
    tags=["products"],
)


async def get_product_schema(
    product_id: uuid.UUID, db: AsyncSession, cache: EntityCache
) -> ProductSchema:

    async def load():
        return ProductSchema.model_validate(
            await get_product_or_404(product_id, db)
        )

    return await cache.get_or_load(c.CACHE_KIND_PRODUCT, product_id, load)


async def get_profile_schema(
    user_id: uuid.UUID, db: AsyncSession, cache: EntityCache
) -> ProfileSchema | None:

    async def load():
        profile = await get_profile_or_none(user_id, db)
        return ProfileSchema.model_validate(profile) if profile else None

    return await cache.get_or_load(c.CACHE_KIND_PROFILE, user_id, load)


async def get_owned_product(
    product_id: uuid.UUID,
    context: SessionContext,
    db: AsyncSession,
    message: str,
):
    """
    Товар, которым владеет текущий пользователь, иначе 403.
    Окончательно права проверяет бэкенд, здесь проверка клиентская.
    """
    product = await get_product_or_404(product_id, db)
    if not context.is_owner(product.user_id):
        raise PermissionDenied(message)
    return product


@router.get('/', response_model=list[ProductCard])
async def get_products(
    product_filter: ProductFilter = FilterDepends(ProductFilter),
    limit: int | None = Query(
        None,
        ge=c.PRODUCT_ROUTER_MIN_SIZE,
        le=c.PRODUCT_ROUTER_MAX_SIZE,
    ),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Возвращает список товаров с возможностью фильтрации
    по статусу, владельцу и категории.
    """
    return await load_products(db, product_filter, limit)


@router.post(
        "/",
        response_model=ListingResult,
        status_code=status.HTTP_201_CREATED
)
async def create_product(
    product: ProductCreate = Depends(ProductCreate.as_form),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_async_db),
    context: SessionContext = Depends(get_session_context),
    storage: ObjectStorage = Depends(get_storage)
):
    """
    Создаёт новое объявление (с необязательным изображением).
    """
    session = require_session(context, c.MESSAGE_SIGN_IN_TO_ADD)
    await validate_category(product.category_id, db)
    db_product = await create_listing(product, image, session, storage, db)
    return ListingResult(
        message=c.MESSAGE_PRODUCT_LISTED,
        redirect_to=c.ROUTE_MARKETPLACE,
        product=ProductSchema.model_validate(db_product)
    )


@router.get(
        "/{product_id}",
        response_model=ProductDetail,
        status_code=status.HTTP_200_OK
)
async def get_product(
    product_id: uuid.UUID,
    show_contact: bool = Query(
        False, description="Показать контакты продавца"
    ),
    db: AsyncSession = Depends(get_async_db),
    context: SessionContext = Depends(get_session_context),
    cache: EntityCache = Depends(get_entity_cache)
):
    """
    Возвращает товар и данные продавца.
    Контакты продавца отдаются только по явному запросу.
    """
    product = await get_product_schema(product_id, db, cache)
    seller = await get_profile_schema(product.user_id, db, cache)
    seller_name = (
        seller.full_name if seller and seller.full_name
        else c.PROFILE_UNKNOWN_NAME
    )

    if context.is_owner(product.user_id):
        controls = ProductControls(can_edit=True, can_delete=True)
        contact = None
    else:
        controls = ProductControls(can_reveal_contact=True)
        contact = SellerContact(
            full_name=seller_name,
            phone=seller.phone if seller else None
        ) if show_contact else None

    return ProductDetail(
        product=product,
        seller_name=seller_name,
        controls=controls,
        contact=contact
    )


@router.put(
        "/{product_id}",
        response_model=ListingResult,
        status_code=status.HTTP_200_OK
)
async def update_product(
    product_id: uuid.UUID,
    product_update: ProductCreate = Depends(ProductCreate.as_form),
    image: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_async_db),
    context: SessionContext = Depends(get_session_context),
    storage: ObjectStorage = Depends(get_storage),
    cache: EntityCache = Depends(get_entity_cache)
):
    """
    Обновляет товар по его ID.
    """
    session = require_session(context)
    product = await get_owned_product(
        product_id, context, db, c.MESSAGE_ONLY_OWNER_UPDATE
    )
    await validate_category(product_update.category_id, db)
    product = await update_listing(
        product, product_update, image, session, storage, db
    )
    cache.invalidate(c.CACHE_KIND_PRODUCT, product_id)
    return ListingResult(
        message=c.MESSAGE_PRODUCT_UPDATED,
        redirect_to=c.ROUTE_PRODUCT.format(product_id=product_id),
        product=ProductSchema.model_validate(product)
    )


@router.post(
        "/{product_id}/sold",
        response_model=ListingResult,
        status_code=status.HTTP_200_OK
)
async def mark_product_sold(
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
    context: SessionContext = Depends(get_session_context),
    cache: EntityCache = Depends(get_entity_cache)
):
    """
    Помечает товар проданным: он пропадает из каталога.
    """
    require_session(context)
    product = await get_owned_product(
        product_id, context, db, c.MESSAGE_ONLY_OWNER_UPDATE
    )
    product = await mark_listing_sold(product, db)
    cache.invalidate(c.CACHE_KIND_PRODUCT, product_id)
    return ListingResult(
        message=c.MESSAGE_PRODUCT_SOLD,
        redirect_to=c.ROUTE_PRODUCT.format(product_id=product_id),
        product=ProductSchema.model_validate(product)
    )


@router.delete(
        "/{product_id}",
        response_model=Notice,
        status_code=status.HTTP_200_OK
)
async def delete_product(
    product_id: uuid.UUID,
    confirm: bool = Query(
        False, description="Подтверждение удаления пользователем"
    ),
    db: AsyncSession = Depends(get_async_db),
    context: SessionContext = Depends(get_session_context),
    storage: ObjectStorage = Depends(get_storage),
    cache: EntityCache = Depends(get_entity_cache)
):
    """
    Удаляет товар по его ID после подтверждения.
    """
    session = require_session(context)
    product = await get_owned_product(
        product_id, context, db, c.MESSAGE_ONLY_OWNER_DELETE
    )
    if not confirm:
        raise MarketError(c.MESSAGE_DELETE_NOT_CONFIRMED)
    await delete_listing(product, session, storage, db)
    cache.invalidate(c.CACHE_KIND_PRODUCT, product_id)
    return Notice(
        message=c.MESSAGE_PRODUCT_DELETED,
        redirect_to=c.ROUTE_MARKETPLACE
    )
