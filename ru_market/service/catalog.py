from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

import ru_market.constants as c
from ru_market.filters import ProductFilter
from ru_market.models.products import Product as ProductModel
from ru_market.schemas import ProductCard


async def load_products(
    db: AsyncSession,
    product_filter: ProductFilter,
    limit: int | None = None,
) -> list[ProductCard]:
    """
    Загружает карточки товаров с названием категории.
    Ошибка бэкенда даёт пустой список: каталог просто ничего не покажет.
    """
    stmt = product_filter.sort(
        product_filter.filter(
            select(ProductModel).options(selectinload(ProductModel.category))
        )
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    try:
        products = (await db.scalars(stmt)).all()
    except SQLAlchemyError as ex:
        logger.error(f'Error fetching products: {ex}')
        return []
    return [ProductCard.model_validate(product) for product in products]


async def load_available_products(
    db: AsyncSession, limit: int | None = None
) -> list[ProductCard]:
    """Доступные к покупке товары, сначала новые"""
    return await load_products(
        db, ProductFilter(status=c.PRODUCT_STATUS_AVAILABLE), limit
    )
