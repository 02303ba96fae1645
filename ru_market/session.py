"""
Контекст сессии текущего пользователя.

Вместо глобального «текущего пользователя» каждый обработчик получает
явный SessionContext. Подписчики узнают о входе и выходе через
subscribe/unsubscribe, а по завершении запроса контекст закрывается
и все подписки снимаются.
"""
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

import ru_market.constants as c


@dataclass(frozen=True)
class AuthSession:
    """Сессия, выданная сервисом идентификации хостинга"""
    user_id: uuid.UUID
    access_token: str
    email: str | None = None
    expires_at: datetime | None = None


SessionListener = Callable[[str, AuthSession | None], None]


class Subscription:

    def __init__(self, context: 'SessionContext', listener: SessionListener):
        self._context = context
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._context._remove_listener(self._listener)
            self.active = False


class SessionContext:

    def __init__(self, session: AuthSession | None = None):
        self._session = session
        self._listeners: list[SessionListener] = []
        self.closed = False

    @property
    def session(self) -> AuthSession | None:
        return self._session

    @property
    def user_id(self) -> uuid.UUID | None:
        return self._session.user_id if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def is_owner(self, user_id: uuid.UUID) -> bool:
        return self.user_id is not None and self.user_id == user_id

    def subscribe(self, listener: SessionListener) -> Subscription:
        if self.closed:
            raise RuntimeError('Session context is closed')
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove_listener(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_session(self, session: AuthSession | None) -> None:
        """Меняет сессию и оповещает подписчиков, если она изменилась"""
        if session == self._session:
            return
        self._session = session
        event = (
            c.SESSION_EVENT_SIGNED_IN
            if session is not None
            else c.SESSION_EVENT_SIGNED_OUT
        )
        for listener in list(self._listeners):
            listener(event, session)

    def close(self) -> None:
        if self._listeners:
            logger.debug(
                f'Dropping {len(self._listeners)} session listener(s)'
            )
        self._listeners.clear()
        self.closed = True
