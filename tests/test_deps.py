import pytest
from fastapi import HTTPException

from product_ratings.core.deps import MAX_SQL_INT, clamp_page, parse_id


@pytest.mark.parametrize(
    ("start", "count", "expected"),
    [
        (None, None, (0, 10)),
        ("0", "5", (0, 5)),
        ("3", "1", (3, 1)),
        ("0", "10", (0, 10)),
        ("0", "11", (0, 10)),
        ("0", "50", (0, 10)),
        ("0", "0", (0, 10)),
        ("-5", "2", (0, 2)),
        ("1000", "2", (1000, 2)),
        ("x", "y", (0, 10)),
        ("+3", "1_0", (0, 10)),
        ("99999999999999999999", "2", (MAX_SQL_INT, 2)),
    ],
)
def test_clamp_page(start, count, expected):
    assert clamp_page(start, count) == expected


def test_parse_id_accepts_digits():
    assert parse_id("42", "product") == 42
    assert parse_id("-1", "product") == -1
    assert parse_id(str(MAX_SQL_INT), "product") == MAX_SQL_INT


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "abc",
        "1.5",
        None,
        "1_0",
        "+1",
        " 1",
        "1 ",
        "١",  # ARABIC-INDIC DIGIT ONE
        "99999999999999999999",
        str(-MAX_SQL_INT - 2),
    ],
)
def test_parse_id_rejects_non_numeric(raw):
    with pytest.raises(HTTPException) as info:
        parse_id(raw, "rating")
    assert info.value.status_code == 400
    assert info.value.detail == "Invalid rating ID"
