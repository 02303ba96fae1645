from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

import ru_market.constants as c


class MarketError(Exception):
    """
    Базовая ошибка маркетплейса.
    Несёт сообщение для пользователя и, при необходимости,
    маршрут клиента, на который нужно перейти.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        redirect_to: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.redirect_to = redirect_to
        super().__init__(self.message)


class NotFoundError(MarketError):

    def __init__(
        self,
        message: str = c.MESSAGE_PRODUCT_NOT_FOUND,
        redirect_to: str | None = c.ROUTE_MARKETPLACE,
    ):
        super().__init__(message, status.HTTP_404_NOT_FOUND, redirect_to)


class AuthenticationRequired(MarketError):

    def __init__(self, message: str = c.MESSAGE_SIGN_IN_REQUIRED):
        super().__init__(
            message, status.HTTP_401_UNAUTHORIZED, c.ROUTE_AUTH
        )


class PermissionDenied(MarketError):

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class BackendError(MarketError):
    """Сбой хостинга: хранилища, БД или сервиса идентификации."""

    def __init__(self, message: str):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY)


def setup_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(MarketError)
    async def market_error_handler(request: Request, exc: MarketError):
        logger.warning(
            f'{exc.__class__.__name__} on {request.url.path}: {exc.message}'
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                'success': False,
                'detail': exc.message,
                'redirect_to': exc.redirect_to,
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f'Database error on {request.url.path}: {exc}')
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                'success': False,
                'detail': c.MESSAGE_BACKEND_UNAVAILABLE,
                'redirect_to': None,
            },
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception(f'Unexpected error on {request.url.path}: {exc}')
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                'success': False,
                'detail': c.MESSAGE_INTERNAL_ERROR,
                'redirect_to': None,
            },
        )
