from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

import ru_market.constants as c
from ru_market.cache import EntityCache, get_entity_cache
from ru_market.db_depends import get_async_db
from ru_market.models.categories import Category as CategoryModel
from ru_market.schemas import Category as CategorySchema


router = APIRouter(
    prefix="/categories",
    tags=["categories"],
)


@router.get("/", response_model=list[CategorySchema])
async def get_all_categories(
    db: AsyncSession = Depends(get_async_db),
    cache: EntityCache = Depends(get_entity_cache)
):
    """
    Возвращает список всех категорий по алфавиту.
    """

    async def load():
        result = await db.scalars(
            select(CategoryModel).order_by(CategoryModel.name)
        )
        return [
            CategorySchema.model_validate(category)
            for category in result.all()
        ] or None

    return await cache.get_or_load(
        c.CACHE_KIND_CATEGORIES, 'all', load
    ) or []
