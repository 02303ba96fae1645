from uuid import UUID, uuid4

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger

import ru_market.config as conf


# log_id по умолчанию для записей вне запроса
logger.configure(extra={'log_id': conf.LOGGER_DEFAULT_LOG_ID})
logger.add(
    conf.LOGGER_FILE,
    format=conf.LOGGER_FORMAT,
    level=conf.LOGGER_LEVEL,
    rotation=conf.LOGGER_ROTATION,
    retention=conf.LOGGER_RETENTION,
    compression=conf.LOGGER_COMPRESSION,
    enqueue=conf.LOGGER_ENQUEUE
)


def get_log_id(request: Request) -> str:
    """log_id клиента принимается только в виде UUID, иначе создаётся новый"""
    try:
        return str(UUID(request.headers.get(conf.LOGGER_HEADER, '')))
    except ValueError:
        return str(uuid4())


async def log_middleware(request: Request, call_next):
    """
    Помечает все записи запроса общим log_id и отдаёт его клиенту
    в заголовке, чтобы обращение можно было найти в логе.
    """
    log_id = get_log_id(request)
    with logger.contextualize(log_id=log_id):
        try:
            response = await call_next(request)
            status_code = response.status_code
            if status_code in conf.LOGGER_WARNING_LIST_STATUS_CODE:
                logger.warning(
                    f'{request.method} {request.url.path} refused'
                    f' ({status_code})'
                )
            elif status_code >= conf.LOGGER_EXCEPTION_STATUS_CODE:
                logger.error(
                    f'{request.method} {request.url.path} failed'
                    f' ({status_code})'
                )
            else:
                logger.info(
                    f'{request.method} {request.url.path} ({status_code})'
                )
        except Exception as ex:
            logger.exception(
                f'Unhandled error on {request.method} {request.url.path}: {ex}'
            )
            response = JSONResponse(
                content={'success': False, 'detail': 'Internal server error'},
                status_code=conf.LOGGER_EXCEPTION_STATUS_CODE
            )
        response.headers[conf.LOGGER_HEADER] = log_id
        return response
