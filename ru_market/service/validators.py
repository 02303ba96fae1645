import uuid

from fastapi import HTTPException, status, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

import ru_market.config as conf
import ru_market.constants as c
from ru_market.models.categories import Category as CategoryModel


async def validate_category(category_id: uuid.UUID, db: AsyncSession):
    """
    Проверка существования категории
    """
    result = await db.scalars(
        select(CategoryModel).where(CategoryModel.id == category_id)
    )
    category = result.first()
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=c.MESSAGE_CATEGORY_NOT_FOUND
        )
    return category


def validate_content_type(file: UploadFile):
    # Сравниваем MIME-тип из заголовка Content-Type
    # с белым списком conf.ALLOWED_IMAGE_TYPES
    if file.content_type not in conf.ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            (
                f"Only {', '.join(sorted(conf.ALLOWED_FILE_EXTENSIONS))} "
                "images are allowed"
            )
        )


def validate_extension(extension: str):
    if extension not in conf.ALLOWED_FILE_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Unsupported file extension: '{extension}'. Only "
                f"{', '.join(sorted(conf.ALLOWED_FILE_EXTENSIONS))} "
                "are allowed."
            )
        )


def validate_size(current_size: int):
    if current_size > conf.MAX_IMAGE_SIZE:
        # 413 - слишком большой размер
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=(
                f"File too large. Max size is "
                f"{conf.MAX_IMAGE_SIZE} B."
            )
        )
