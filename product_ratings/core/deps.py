from __future__ import annotations

import re
from typing import Optional

from fastapi import HTTPException, status

from product_ratings.core.db import get_db

__all__ = ["get_db", "parse_id", "clamp_page"]

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 10

# Largest value a BIGINT/SQLite INTEGER parameter can carry.
MAX_SQL_INT = 2**63 - 1

_INTEGER_RE = re.compile(r"-?[0-9]+")


def _sql_int(raw: Optional[str]) -> Optional[int]:
    """Plain ASCII decimal within the SQL integer range, else None."""
    if raw is None or not _INTEGER_RE.fullmatch(raw):
        return None
    value = int(raw)
    if abs(value) > MAX_SQL_INT:
        return None
    return value


def parse_id(raw: str, entity: str) -> int:
    """
    Parse a numeric path identifier, answering 400 "Invalid <entity> ID"
    when it is not a plain integer the store can take.
    """
    value = _sql_int(raw)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {entity} ID",
        )
    return value


def _lenient_int(raw: Optional[str]) -> int:
    # Absent or non-numeric query values count as 0.
    if raw is None or not _INTEGER_RE.fullmatch(raw):
        return 0
    return int(raw)


def clamp_page(start: Optional[str], count: Optional[str]) -> tuple[int, int]:
    """
    Normalize `start`/`count` query values.

    `count` outside [1, MAX_PAGE_SIZE] becomes DEFAULT_PAGE_SIZE, a negative
    `start` becomes 0. `start` is only capped at MAX_SQL_INT.
    """
    count_i = _lenient_int(count)
    start_i = _lenient_int(start)

    if count_i < 1 or count_i > MAX_PAGE_SIZE:
        count_i = DEFAULT_PAGE_SIZE
    if start_i < 0:
        start_i = 0
    return min(start_i, MAX_SQL_INT), count_i
