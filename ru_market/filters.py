import uuid
from collections.abc import Sequence
from typing import Optional

from fastapi_filter.contrib.sqlalchemy import Filter
from pydantic import ConfigDict, Field

import ru_market.constants as c
from ru_market.models.products import Product as ProductModel


class ProductFilter(Filter):
    """
    Фильтр для загрузки каталога из модели Product.
    Учитываются только явно заданные поля, сортировка по умолчанию:
    сначала новые.
    """
    status: Optional[str] = Field(default=None)
    user_id: Optional[uuid.UUID] = Field(default=None)
    category_id: Optional[uuid.UUID] = Field(default=None)
    order_by: Optional[list[str]] = Field(default=['-created_at'])

    model_config = ConfigDict(populate_by_name=True)

    class Constants(Filter.Constants):
        model = ProductModel


def category_slug(name: str | None) -> str | None:
    """
    Slug категории: название в нижнем регистре,
    пробелы заменены дефисами ("Smart Watch" -> "smart-watch").
    """
    if name is None:
        return None
    return name.lower().replace(' ', '-')


def filter_products(products: Sequence, category: str, query: str) -> list:
    """
    Сужает уже загруженный список карточек товаров
    по slug категории и подстроке в названии (без учёта регистра).
    Порядок исходного списка сохраняется.
    """
    filtered = list(products)

    if category != c.CATEGORY_SLUG_ALL:
        filtered = [
            product for product in filtered
            if category_slug(product.category) == category
        ]

    if query:
        needle = query.lower()
        filtered = [
            product for product in filtered
            if needle in product.title.lower()
        ]

    return filtered
