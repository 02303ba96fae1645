from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import ru_market.constants as c
from ru_market.auth import get_session_context, require_session
from ru_market.db_depends import get_async_db
from ru_market.errors import BackendError
from ru_market.models.reviews import Review as ReviewModel
from ru_market.schemas import (
    Review as ReviewSchema,
    ReviewBoard,
    ReviewCreate,
    ReviewResult
)
from ru_market.service.tools import create_object_model
from ru_market.session import SessionContext


router = APIRouter(
    prefix="/reviews",
    tags=["reviews"],
)


@router.get('/', response_model=ReviewBoard)
async def get_reviews(
    db: AsyncSession = Depends(get_async_db)
):
    """
    Общая лента отзывов, сначала новые.
    """
    try:
        reviews_db = await db.scalars(
            select(ReviewModel).order_by(ReviewModel.created_at.desc())
        )
        reviews = reviews_db.all()
    except SQLAlchemyError as ex:
        logger.error(f'Error fetching reviews: {ex}')
        return ReviewBoard(items=[], message=c.MESSAGE_REVIEWS_LOAD_FAILED)
    return ReviewBoard(
        items=[ReviewSchema.model_validate(review) for review in reviews],
        message=None if reviews else c.MESSAGE_NO_REVIEWS
    )


@router.post(
    '/',
    response_model=ReviewResult,
    status_code=status.HTTP_201_CREATED
)
async def create_review(
    review: ReviewCreate,
    db: AsyncSession = Depends(get_async_db),
    context: SessionContext = Depends(get_session_context)
):
    session = require_session(context, c.MESSAGE_SIGN_IN_TO_REVIEW)
    try:
        new_review = await create_object_model(
            model=ReviewModel,
            values=review.model_dump() | {'user_id': session.user_id},
            db=db
        )
    except SQLAlchemyError as ex:
        await db.rollback()
        logger.error(f'Review insert failed: {ex}')
        raise BackendError(c.MESSAGE_REVIEW_FAILED)
    return ReviewResult(
        message=c.MESSAGE_REVIEW_SUBMITTED,
        redirect_to=c.ROUTE_REVIEWS,
        review=ReviewSchema.model_validate(new_review)
    )
