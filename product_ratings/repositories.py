"""
Product and rating persistence.

Every function runs a single statement on the given session and commits it.
Failures come back as `StoreError` subclasses (see `core.db.classify_errors`).
"""

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from product_ratings.core.db import classify_errors
from product_ratings.core.errors import NotFound
from product_ratings.core.logging import get_logger
from product_ratings.models import Product, Rating
from product_ratings.schemas import ProductIn, RatingIn

logger = get_logger(__name__)


# -------------------------
# Products
# -------------------------
def create_product(db: Session, payload: ProductIn) -> Product:
    product = Product(name=payload.name, price=payload.price)
    with classify_errors(db):
        db.add(product)
        db.commit()
        db.refresh(product)
    logger.info("Created product id=%s", product.id)
    return product


def get_product(db: Session, product_id: int) -> Product:
    with classify_errors(db):
        product = db.get(Product, product_id)
    if product is None:
        raise NotFound(f"product {product_id}")
    return product


def list_products(db: Session, start: int, count: int) -> list[Product]:
    stmt = select(Product).order_by(Product.id).limit(count).offset(start)
    with classify_errors(db):
        return list(db.execute(stmt).scalars().all())


def update_product(db: Session, product_id: int, payload: ProductIn) -> Product:
    # A missing row is not an error: zero rows updated still succeeds.
    stmt = (
        update(Product)
        .where(Product.id == product_id)
        .values(name=payload.name, price=payload.price)
    )
    with classify_errors(db):
        db.execute(stmt)
        db.commit()
    return Product(id=product_id, name=payload.name, price=payload.price)


def delete_product(db: Session, product_id: int) -> None:
    with classify_errors(db):
        db.execute(delete(Product).where(Product.id == product_id))
        db.commit()
    logger.info("Deleted product id=%s", product_id)


# -------------------------
# Ratings
# -------------------------
def create_rating(db: Session, payload: RatingIn) -> Rating:
    rating = Rating(product_id=payload.product_id, rating=payload.rating, text=payload.rating_text)
    with classify_errors(db):
        db.add(rating)
        db.commit()
        db.refresh(rating)
    logger.info("Created rating id=%s for product id=%s", rating.rating_id, rating.product_id)
    return rating


def get_rating(db: Session, rating_id: int) -> Rating:
    with classify_errors(db):
        rating = db.get(Rating, rating_id)
    if rating is None:
        raise NotFound(f"rating {rating_id}")
    return rating


def list_ratings_for_product(db: Session, product_id: int, start: int, count: int) -> list[Rating]:
    """
    Ratings of one product. An unknown product gives an empty list.
    """
    stmt = (
        select(Rating)
        .where(Rating.product_id == product_id)
        .order_by(Rating.rating_id)
        .limit(count)
        .offset(start)
    )
    with classify_errors(db):
        return list(db.execute(stmt).scalars().all())


def update_rating(db: Session, rating_id: int, payload: RatingIn) -> Rating:
    stmt = (
        update(Rating)
        .where(Rating.rating_id == rating_id)
        .values(
            {
                Rating.product_id: payload.product_id,
                Rating.rating: payload.rating,
                Rating.text: payload.rating_text,
            }
        )
    )
    with classify_errors(db):
        db.execute(stmt)
        db.commit()
    return Rating(
        rating_id=rating_id,
        product_id=payload.product_id,
        rating=payload.rating,
        text=payload.rating_text,
    )


def delete_rating(db: Session, rating_id: int) -> None:
    with classify_errors(db):
        db.execute(delete(Rating).where(Rating.rating_id == rating_id))
        db.commit()
    logger.info("Deleted rating id=%s", rating_id)
