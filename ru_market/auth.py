import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

import ru_market.constants as c
from ru_market.config import (
    SUPABASE_JWT_SECRET,
    JWT_ALGORITHM,
    JWT_AUDIENCE,
)
from ru_market.errors import AuthenticationRequired
from ru_market.session import AuthSession, SessionContext

bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> AuthSession:
    """
    Проверяет access-токен сервиса идентификации и возвращает сессию.
    Токены здесь не выпускаются, только читаются.
    """
    try:
        payload = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationRequired(c.MESSAGE_SESSION_EXPIRED)
    except jwt.PyJWTError:
        raise AuthenticationRequired(c.MESSAGE_SESSION_INVALID)

    subject = payload.get(c.TOKEN_DICT_KEY_SUBJECT)
    try:
        user_id = uuid.UUID(str(subject))
    except ValueError:
        raise AuthenticationRequired(c.MESSAGE_SESSION_INVALID)

    expire = payload.get(c.TOKEN_DICT_KEY_EXPIRE)
    return AuthSession(
        user_id=user_id,
        access_token=token,
        email=payload.get(c.TOKEN_DICT_KEY_EMAIL),
        expires_at=(
            datetime.fromtimestamp(expire, tz=timezone.utc)
            if expire is not None else None
        ),
    )


async def get_session_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)
) -> AsyncGenerator[SessionContext, None]:
    """
    Создаёт контекст сессии на время запроса.
    Недействительный токен означает анонимного зрителя.
    """
    session = None
    if credentials is not None:
        try:
            session = decode_access_token(credentials.credentials)
        except AuthenticationRequired as ex:
            logger.warning(f'Ignoring access token: {ex.message}')
    context = SessionContext(session)
    try:
        yield context
    finally:
        context.close()


def require_session(
    context: SessionContext, message: str = c.MESSAGE_SIGN_IN_REQUIRED
) -> AuthSession:
    if context.session is None:
        raise AuthenticationRequired(message)
    return context.session


async def get_current_session(
    context: SessionContext = Depends(get_session_context)
) -> AuthSession:
    """Сессия обязательна: иначе 401 и переход на страницу входа"""
    return require_session(context)
