# tests/test_paging.py
import pytest

from helpdesk.tickets.application import normalize_paging


def test_defaults():
    assert normalize_paging(None, None) == (1, 10)


@pytest.mark.parametrize("page,limit,expected", [
    (0, 1000, (1, 50)),
    (-3, -1, (1, 1)),
    (2, 0, (2, 1)),
    (4, 25, (4, 25)),
    ("3", "5", (3, 5)),
])
def test_clamping(page, limit, expected):
    assert normalize_paging(page, limit) == expected


def test_unparsable_values_fall_back():
    assert normalize_paging("first", "many") == (1, 10)
    assert normalize_paging("", "") == (1, 10)
