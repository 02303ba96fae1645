from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

import ru_market.constants as c
from ru_market.db_depends import get_async_db
from ru_market.filters import filter_products
from ru_market.schemas import CatalogPage
from ru_market.service.catalog import load_available_products
from .home import get_category_choices


router = APIRouter(
    prefix="/marketplace",
    tags=["marketplace"],
)


@router.get("/", response_model=CatalogPage)
async def get_marketplace(
    search: str = Query("", description="Поиск по названию"),
    category: str = Query(
        c.CATEGORY_SLUG_ALL, description="Slug категории"
    ),
    limit: int | None = Query(
        None,
        ge=c.PRODUCT_ROUTER_MIN_SIZE,
        le=c.PRODUCT_ROUTER_MAX_SIZE,
    ),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Каталог: все доступные товары, отфильтрованные
    по категории и названию уже после загрузки.
    """
    products = await load_available_products(db, limit)
    items = filter_products(products, category, search)

    message = None
    if not products:
        message = c.MESSAGE_NO_PRODUCTS_YET
    elif not items:
        message = c.MESSAGE_NO_PRODUCTS_FOUND

    return CatalogPage(
        items=items,
        total=len(items),
        category=category,
        search=search,
        categories=get_category_choices(),
        message=message
    )
