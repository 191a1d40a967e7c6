import random

import pytest

from paimeng.randomizer import parse_range, random_item, random_number


def test_parse_range():
    assert parse_range("1...10") == (1, 10)


def test_parse_range_swapped():
    assert parse_range("10...1") == (1, 10)


def test_parse_range_negative():
    assert parse_range("-5...5") == (-5, 5)


@pytest.mark.parametrize("text", ["1..10", "abc", "1-10", "...3"])
def test_parse_range_invalid(text):
    with pytest.raises(ValueError):
        parse_range(text)


def test_random_number_in_range():
    rng = random.Random(1)
    values = {random_number("1...10", rng) for _ in range(200)}
    assert values <= set(range(1, 11))
    assert len(values) > 1


def test_random_number_single_value():
    assert random_number(" 7...7 ", random.Random(0)) == 7


def test_random_number_empty():
    with pytest.raises(ValueError):
        random_number("   ")


def test_random_number_bad_format():
    with pytest.raises(ValueError):
        random_number("one to ten")


def test_random_item_choice():
    rng = random.Random(3)
    picks = {random_item("a b  c", rng) for _ in range(100)}
    assert picks <= {"a", "b", "c"}
    assert "" not in picks


def test_random_item_duplicates():
    assert random_item("x x x", random.Random(0)) == "x"


def test_random_item_empty():
    with pytest.raises(ValueError):
        random_item("   ")