import time

from fastapi import Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

import ru_market.config as conf


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Добавляет к ответу заголовок X-Process-Time (в миллисекундах)
    и пишет в лог медленные запросы.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        response.headers['X-Process-Time'] = f'{duration_ms:.2f}'
        if duration_ms > conf.SLOW_REQUEST_MS:
            logger.warning(
                f'Slow request {request.method} {request.url.path}'
                f' ({duration_ms:.0f} ms)'
            )
        return response
