import time
import uuid
from pathlib import Path

from fastapi import HTTPException, status, UploadFile
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

import ru_market.config as conf
import ru_market.constants as c
from ru_market.errors import BackendError, NotFoundError
from ru_market.models.products import Product as ProductModel
from ru_market.models.profiles import Profile as ProfileModel
from .validators import (
    validate_content_type,
    validate_extension,
    validate_size
)


async def commit_and_refresh(object_model, db: AsyncSession):
    await db.commit()
    await db.refresh(object_model)
    return object_model


async def create_object_model(model, values: dict, db: AsyncSession):
    db_object = model(**values)
    db.add(db_object)
    db_object = await commit_and_refresh(db_object, db)
    return db_object


async def update_object_model(
    model, object_model, values: dict, db: AsyncSession
):
    await db.execute(
        update(model)
        .where(model.id == object_model.id)
        .values(**values)
    )
    object_model = await commit_and_refresh(object_model, db)
    return object_model


async def get_product_or_404(
    product_id: uuid.UUID, db: AsyncSession
) -> ProductModel:
    """
    Товар вместе с категорией, иначе 404 с переходом в каталог.
    Сбой базы отдаётся как 502.
    """
    try:
        result = await db.scalars(
            select(ProductModel)
            .options(selectinload(ProductModel.category))
            .where(ProductModel.id == product_id)
            .execution_options(populate_existing=True)
        )
        product = result.first()
    except SQLAlchemyError as ex:
        logger.error(f'Error fetching product {product_id}: {ex}')
        raise BackendError(c.MESSAGE_PRODUCT_LOAD_FAILED)
    if product is None:
        raise NotFoundError()
    return product


def get_extension(file: UploadFile) -> str:
    """
    Расширение из оригинального имени файла, по умолчанию .jpg
    """
    extension = (
        Path(file.filename or "").suffix.lower()
        or conf.DEFAULT_FILE_EXTENSION
    )
    validate_extension(extension)
    return extension


def build_object_path(
    user_id: uuid.UUID, extension: str, timestamp: float | None = None
) -> str:
    """
    Путь объекта в бакете: {userId}/{метка времени в мс}.{расширение}
    """
    if timestamp is None:
        timestamp = time.time()
    return f'{user_id}/{int(timestamp * 1000)}.{extension.lstrip(".")}'


async def read_image(file: UploadFile) -> tuple[bytes, str]:
    """
    Валидирует изображение и считывает его чанками.
    Возвращает байты и расширение файла.
    """
    validate_content_type(file)
    extension = get_extension(file)
    # счетчик для измерения размера загружаемого файла
    current_size = 0
    chanks = []
    while content := await file.read(conf.CHANK_SIZE):
        current_size += len(content)
        validate_size(current_size)
        chanks.append(content)
    if not current_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded image is empty"
        )
    return b''.join(chanks), extension


async def get_profile_or_none(
    user_id: uuid.UUID, db: AsyncSession
) -> ProfileModel | None:
    try:
        return await db.get(ProfileModel, user_id)
    except SQLAlchemyError as ex:
        logger.error(f'Error fetching profile {user_id}: {ex}')
        raise BackendError(c.MESSAGE_PROFILE_LOAD_FAILED)
