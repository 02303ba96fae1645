import uuid
from typing import Optional
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

import ru_market.constants as c
from ru_market.database import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(
        String(c.PRODUCT_TITLE_MAX_LENGTCH), nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(
        Numeric(c.PRODUCT_PRICE_MAX_DIGITS, c.PRODUCT_PRICE_DECIMAL_PLACES),
        nullable=False
    )
    condition: Mapped[str] = mapped_column(String(20), nullable=False)
    # Слабая ссылка: категория может исчезнуть, товар останется
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    image_url: Mapped[str | None] = mapped_column(
        String(c.PRODUCT_MAX_LENGTH_IMAGE_URL), nullable=True
    )
    # id пользователя из сервиса идентификации
    user_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(c.PRODUCT_STATUS_LENGTH_MAX),
        default=c.PRODUCT_STATUS_AVAILABLE,
        nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    category: Mapped[Optional["Category"]] = relationship(
        back_populates="products"
    )

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None
