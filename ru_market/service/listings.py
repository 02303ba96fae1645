"""
Сценарии редактора объявлений: загрузка изображения и запись строки товара.

Загрузка и запись не атомарны. Если запись строки не удалась после
успешной загрузки, только что загруженный объект удаляется из хранилища.
"""
from fastapi import UploadFile
from loguru import logger
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import ru_market.constants as c
from ru_market.errors import BackendError
from ru_market.models.products import Product as ProductModel
from ru_market.schemas import ProductCreate
from ru_market.session import AuthSession
from .storage import ObjectStorage, StorageError
from .tools import (
    build_object_path,
    create_object_model,
    get_product_or_404,
    read_image,
    update_object_model
)


def has_image(image: UploadFile | None) -> bool:
    # пустое поле файла в форме приходит с пустым именем
    return image is not None and bool(image.filename)


async def upload_product_image(
    image: UploadFile,
    session: AuthSession,
    storage: ObjectStorage,
) -> tuple[str, str]:
    """
    Загружает изображение товара, возвращает публичный URL и путь объекта
    """
    data, extension = await read_image(image)
    path = build_object_path(session.user_id, extension)
    try:
        url = await storage.upload(
            path, data, image.content_type, session.access_token
        )
    except StorageError as ex:
        logger.error(f'Image upload failed: {ex}')
        raise BackendError(c.MESSAGE_IMAGE_UPLOAD_FAILED)
    return url, path


async def discard_uploaded_image(
    path: str | None, session: AuthSession, storage: ObjectStorage
) -> None:
    """Удаление загруженного объекта, ошибка только логируется"""
    if path is None:
        return
    try:
        await storage.remove([path], session.access_token)
    except StorageError as ex:
        logger.error(f'Uploaded image {path} left orphaned: {ex}')


async def create_listing(
    product: ProductCreate,
    image: UploadFile | None,
    session: AuthSession,
    storage: ObjectStorage,
    db: AsyncSession,
) -> ProductModel:
    image_url, image_path = None, None
    if has_image(image):
        image_url, image_path = await upload_product_image(
            image, session, storage
        )
    values = product.model_dump() | {
        'user_id': session.user_id,
        'image_url': image_url,
        'status': c.PRODUCT_STATUS_AVAILABLE,
    }
    try:
        db_product = await create_object_model(ProductModel, values, db)
    except SQLAlchemyError as ex:
        await db.rollback()
        logger.error(f'Product insert failed: {ex}')
        await discard_uploaded_image(image_path, session, storage)
        raise BackendError(c.MESSAGE_PRODUCT_ADD_FAILED)
    logger.info(f'Product {db_product.id} listed by {session.user_id}')
    return await get_product_or_404(db_product.id, db)


async def update_listing(
    db_product: ProductModel,
    product: ProductCreate,
    image: UploadFile | None,
    session: AuthSession,
    storage: ObjectStorage,
    db: AsyncSession,
) -> ProductModel:
    values = product.model_dump()
    product_id, old_image_url = db_product.id, db_product.image_url
    image_path = None
    if has_image(image):
        values['image_url'], image_path = await upload_product_image(
            image, session, storage
        )
    try:
        await update_object_model(ProductModel, db_product, values, db)
    except SQLAlchemyError as ex:
        await db.rollback()
        logger.error(f"Product {product_id} update failed: {ex}")
        await discard_uploaded_image(image_path, session, storage)
        raise BackendError(c.MESSAGE_PRODUCT_UPDATE_FAILED)
    if image_path is not None:
        # прежнее изображение больше ни на что не ссылается
        await discard_uploaded_image(
            storage.path_from_public_url(old_image_url), session, storage
        )
    return await get_product_or_404(product_id, db)


async def mark_listing_sold(
    db_product: ProductModel, db: AsyncSession
) -> ProductModel:
    product_id = db_product.id
    try:
        await update_object_model(
            ProductModel, db_product, {'status': c.PRODUCT_STATUS_SOLD}, db
        )
    except SQLAlchemyError as ex:
        await db.rollback()
        logger.error(f"Product {product_id} status update failed: {ex}")
        raise BackendError(c.MESSAGE_PRODUCT_UPDATE_FAILED)
    return await get_product_or_404(product_id, db)


async def delete_listing(
    db_product: ProductModel,
    session: AuthSession,
    storage: ObjectStorage,
    db: AsyncSession,
) -> None:
    product_id, image_url = db_product.id, db_product.image_url
    try:
        await db.execute(
            delete(ProductModel).where(ProductModel.id == product_id)
        )
        await db.commit()
    except SQLAlchemyError as ex:
        await db.rollback()
        logger.error(f"Product {product_id} delete failed: {ex}")
        raise BackendError(c.MESSAGE_PRODUCT_DELETE_FAILED)
    logger.info(f"Product {product_id} deleted by {session.user_id}")
    await discard_uploaded_image(
        storage.path_from_public_url(image_url), session, storage
    )
