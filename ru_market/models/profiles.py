import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

import ru_market.constants as c
from ru_market.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Совпадает с id пользователя в сервисе идентификации
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True)
    full_name: Mapped[str | None] = mapped_column(
        String(c.PROFILE_FULL_NAME_MAX_LENGTH), nullable=True
    )
    phone: Mapped[str | None] = mapped_column(
        String(c.PROFILE_PHONE_MAX_LENGTH), nullable=True
    )
