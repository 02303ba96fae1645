import uuid
from datetime import datetime
from decimal import Decimal

from fastapi import Form
from fastapi.exceptions import RequestValidationError
from pydantic import (
    BaseModel, Field, ConfigDict, ValidationError, computed_field
)
from typing import Optional

import ru_market.constants as c
from ru_market.filters import category_slug


PRODUCT_CONDITION_PATTERN = f'^({"|".join(c.PRODUCT_CONDITIONS)})$'


class Notice(BaseModel):
    """
    Кратковременное уведомление для пользователя и маршрут клиента,
    на который нужно перейти после действия.
    """
    success: bool = True
    message: str
    redirect_to: Optional[str] = None


class CategoryChoice(BaseModel):
    name: str
    slug: str


class Category(BaseModel):
    """
    Модель для ответа с данными категории.
    """
    id: uuid.UUID
    name: str

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def slug(self) -> str:
        return category_slug(self.name)


class ProductCreate(BaseModel):
    """
    Модель для создания и обновления товара.
    Используется в POST и PUT запросах (multipart-форма).
    """
    title: str = Field(
        min_length=c.PRODUCT_TITLE_MIN_LENGTCH,
        max_length=c.PRODUCT_TITLE_MAX_LENGTCH,
        description=(
            f'Название товара ({c.PRODUCT_TITLE_MIN_LENGTCH}-'
            f'{c.PRODUCT_TITLE_MAX_LENGTCH} символов)'
        )
    )
    description: Optional[str] = Field(
        None,
        max_length=c.PRODUCT_DESCRIPTION_MAX_LENGTCH,
        description=(
            'Описание товара (до '
            f'{c.PRODUCT_DESCRIPTION_MAX_LENGTCH} символов)'
        )
    )
    price: Decimal = Field(
        gt=c.PRODUCT_MIN_PRICE,
        max_digits=c.PRODUCT_PRICE_MAX_DIGITS,
        decimal_places=c.PRODUCT_PRICE_DECIMAL_PLACES,
        description=f'Цена товара (больше {c.PRODUCT_MIN_PRICE})'
    )
    condition: str = Field(
        pattern=PRODUCT_CONDITION_PATTERN,
        description=f'Состояние: {", ".join(c.PRODUCT_CONDITIONS)}'
    )
    category_id: uuid.UUID = Field(
        description="ID категории, к которой относится товар"
    )

    model_config = ConfigDict(str_strip_whitespace=True)

    @classmethod
    def as_form(
        cls,
        title: str = Form(...),
        description: Optional[str] = Form(None),
        price: str = Form(...),
        condition: str = Form(...),
        category_id: str = Form(...),
    ):
        """Собирает модель из полей формы, ошибки отдаются как 422."""
        try:
            return cls(
                title=title,
                description=(description or '').strip() or None,
                price=price,
                condition=condition,
                category_id=category_id,
            )
        except ValidationError as ex:
            raise RequestValidationError(
                ex.errors(include_url=False, include_context=False)
            )


class ProductCard(BaseModel):
    """
    Карточка товара в каталоге, с денормализованным названием категории.
    """
    id: uuid.UUID
    title: str
    price: Decimal
    condition: str
    image_url: Optional[str] = None
    category: Optional[str] = Field(None, validation_alias='category_name')
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Product(ProductCard):
    """
    Полные данные товара для страницы товара.
    """
    description: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    user_id: uuid.UUID


class ListingResult(Notice):
    product: Product


class CatalogPage(BaseModel):
    items: list[ProductCard]
    total: int
    category: str = c.CATEGORY_SLUG_ALL
    search: str = ''
    categories: list[CategoryChoice]
    message: Optional[str] = None


class HomePage(BaseModel):
    message: str = c.MESSAGE_WELCOME
    featured: list[ProductCard]
    categories: list[CategoryChoice]


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(
        None, max_length=c.PROFILE_FULL_NAME_MAX_LENGTH
    )
    phone: Optional[str] = Field(None, max_length=c.PROFILE_PHONE_MAX_LENGTH)

    model_config = ConfigDict(str_strip_whitespace=True)


class Profile(ProfileUpdate):
    id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)


class ProfilePage(BaseModel):
    profile: Optional[Profile] = None
    email: Optional[str] = None
    products: list[ProductCard]
    message: Optional[str] = None


class ProfileResult(Notice):
    profile: Profile


class SellerContact(BaseModel):
    full_name: str
    phone: Optional[str] = None


class ProductControls(BaseModel):
    """Какие действия доступны зрителю на странице товара"""
    can_edit: bool = False
    can_delete: bool = False
    can_reveal_contact: bool = False


class ProductDetail(BaseModel):
    product: Product
    seller_name: str
    controls: ProductControls
    # Заполняется только по явному запросу зрителя
    contact: Optional[SellerContact] = None


class ReviewCreate(BaseModel):
    rating: int = Field(
        default=c.REVIEW_GRADE_DEFAULT_VALUE,
        strict=True,
        ge=c.REVIEW_GRADE_MIN_VALUE,
        le=c.REVIEW_GRADE_MAX_VALUE,
        description=(
            f'Оценка от {c.REVIEW_GRADE_MIN_VALUE} до '
            f'{c.REVIEW_GRADE_MAX_VALUE} звёзд'
        )
    )
    comment: str = Field(
        min_length=c.REVIEW_COMMENT_MIN_LENGTH,
        max_length=c.REVIEW_COMMENT_MAX_LENGTH
    )

    model_config = ConfigDict(str_strip_whitespace=True)


class Review(ReviewCreate):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewBoard(BaseModel):
    items: list[Review]
    message: Optional[str] = None


class ReviewResult(Notice):
    review: Review


class NavLink(BaseModel):
    title: str
    href: str


class SessionState(BaseModel):
    is_authenticated: bool
    user_id: Optional[uuid.UUID] = None
    email: Optional[str] = None
    links: list[NavLink]


class AboutPage(BaseModel):
    title: str = c.ABOUT_TITLE
    paragraphs: list[str] = list(c.ABOUT_TEXT)
