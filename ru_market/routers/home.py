from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

import ru_market.constants as c
from ru_market.db_depends import get_async_db
from ru_market.schemas import AboutPage, CategoryChoice, HomePage
from ru_market.service.catalog import load_available_products


router = APIRouter(tags=["home"])


def get_category_choices() -> list[CategoryChoice]:
    return [
        CategoryChoice(name=name, slug=slug)
        for name, slug in c.CATEGORY_CHOICES
    ]


@router.get("/", response_model=HomePage)
async def get_home(db: AsyncSession = Depends(get_async_db)):
    """
    Главная: последние доступные товары и категории.
    """
    featured = await load_available_products(db, limit=c.PRODUCT_HOME_LIMIT)
    return HomePage(featured=featured, categories=get_category_choices())


@router.get("/search")
async def search(request: Request, q: str = Query("")):
    """
    Поиск с главной: переход в каталог с параметром search.
    """
    url = request.url_for("get_marketplace").include_query_params(search=q)
    return RedirectResponse(str(url), status_code=status.HTTP_303_SEE_OTHER)


@router.get("/about", response_model=AboutPage)
async def get_about():
    return AboutPage()
