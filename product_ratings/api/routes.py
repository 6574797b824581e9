from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from product_ratings import repositories
from product_ratings.core.deps import clamp_page, get_db, parse_id
from product_ratings.core.errors import ForeignKeyViolation, NotFound, StoreError
from product_ratings.schemas import DeleteResult, ProductIn, ProductRead, RatingIn, RatingRead

router = APIRouter()

NO_SUCH_PRODUCT = "No product with the specified id exists!"


@contextmanager
def store_errors(
    not_found: Optional[str] = None,
    foreign_key: Optional[str] = None,
) -> Iterator[None]:
    """
    Translate store errors raised inside the block into HTTP errors.

    `foreign_key` turns a ForeignKeyViolation into a 400; without it the
    violation is reported like any other store failure.
    """
    try:
        yield
    except NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found or str(exc)) from exc
    except ForeignKeyViolation as exc:
        if foreign_key is None:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=foreign_key) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


# -------------------------
# Products
# -------------------------
@router.post("/product", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def http_create_product(payload: ProductIn, db: Session = Depends(get_db)):
    with store_errors():
        return repositories.create_product(db, payload)


@router.get("/product/{product_id}", response_model=ProductRead)
def http_get_product(product_id: str, db: Session = Depends(get_db)):
    pid = parse_id(product_id, "product")
    with store_errors(not_found="Product not found"):
        return repositories.get_product(db, pid)


@router.get("/products", response_model=list[ProductRead])
def http_list_products(
    start: Optional[str] = Query(default=None),
    count: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    start_i, count_i = clamp_page(start, count)
    with store_errors():
        return repositories.list_products(db, start_i, count_i)


@router.put("/product/{product_id}", response_model=ProductRead)
def http_update_product(product_id: str, payload: ProductIn, db: Session = Depends(get_db)):
    pid = parse_id(product_id, "product")
    with store_errors():
        return repositories.update_product(db, pid, payload)


@router.delete("/product/{product_id}", response_model=DeleteResult)
def http_delete_product(product_id: str, db: Session = Depends(get_db)):
    pid = parse_id(product_id, "product")
    with store_errors():
        repositories.delete_product(db, pid)
    return DeleteResult()


# -------------------------
# Ratings
# -------------------------
@router.post("/rating", response_model=RatingRead, status_code=status.HTTP_201_CREATED)
def http_create_rating(payload: RatingIn, db: Session = Depends(get_db)):
    with store_errors(foreign_key=NO_SUCH_PRODUCT):
        return repositories.create_rating(db, payload)


@router.get("/rating/{rating_id}", response_model=RatingRead)
def http_get_rating(rating_id: str, db: Session = Depends(get_db)):
    rid = parse_id(rating_id, "rating")
    with store_errors(not_found="Rating not found"):
        return repositories.get_rating(db, rid)


@router.get("/ratings/{product_id}", response_model=list[RatingRead])
def http_list_ratings_for_product(
    product_id: str,
    start: Optional[str] = Query(default=None),
    count: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
):
    pid = parse_id(product_id, "product")
    start_i, count_i = clamp_page(start, count)
    with store_errors():
        return repositories.list_ratings_for_product(db, pid, start_i, count_i)


@router.put("/rating/{rating_id}", response_model=RatingRead)
def http_update_rating(rating_id: str, payload: RatingIn, db: Session = Depends(get_db)):
    rid = parse_id(rating_id, "rating")
    with store_errors():
        return repositories.update_rating(db, rid, payload)


@router.delete("/rating/{rating_id}", response_model=DeleteResult)
def http_delete_rating(rating_id: str, db: Session = Depends(get_db)):
    rid = parse_id(rating_id, "rating")
    with store_errors():
        repositories.delete_rating(db, rid)
    return DeleteResult()
