from sqlalchemy.ext.asyncio import (
    create_async_engine, async_sessionmaker, AsyncSession
)
from sqlalchemy.orm import DeclarativeBase

import ru_market.config as conf


# Подключение к Postgres хостинга (таблицы уже существуют на его стороне)
async_engine = create_async_engine(
    conf.DATABASE_URL, echo=conf.DATABASE_ECHO, pool_pre_ping=True
)

# Настраиваем фабрику сеансов
async_session_maker = async_sessionmaker(
    async_engine, expire_on_commit=False, class_=AsyncSession
)


class Base(DeclarativeBase):
    pass
