from typing import Optional

from sqlalchemy import ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from product_ratings.core.db import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, server_default="0.00"
    )


class Rating(Base):
    __tablename__ = "ratings"

    rating_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("products.id"))
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    # Exposed as `rating_text` in the API.
    text: Mapped[Optional[str]] = mapped_column("info", Text, nullable=True)
