import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

import ru_market.constants as c
from ru_market.database import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(
        String(c.CATEGORY_NAME_MAX_LENGTCH), nullable=False
    )
    products: Mapped[list["Product"]] = relationship(
        "Product", back_populates="category"
    )
