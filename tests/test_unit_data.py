import random
from datetime import datetime, timezone

from opsdemo.data import count_errors, generate_items, parse_count, utc_timestamp


def test_parse_count_defaults_when_missing():
    assert parse_count(None) == 10
    assert parse_count("") == 10


def test_parse_count_leading_integer():
    assert parse_count("5") == 5
    assert parse_count("  7") == 7
    assert parse_count("+3") == 3
    assert parse_count("12abc") == 12
    assert parse_count("1e3") == 1


def test_parse_count_malformed_is_zero():
    # Not a 400: bad input quietly yields an empty batch.
    assert parse_count("abc") == 0
    assert parse_count("x5") == 0
    assert parse_count("-") == 0


def test_parse_count_negative_is_zero():
    assert parse_count("-4") == 0


def test_generate_items_shape():
    items = generate_items(3, rng=random.Random(1))
    assert [i["id"] for i in items] == [1, 2, 3]
    assert [i["name"] for i in items] == ["Item 1", "Item 2", "Item 3"]
    assert all(i["status"] in ("ok", "error") for i in items)
    assert all(i["timestamp"].endswith("Z") for i in items)


def test_generate_items_error_rate_bounds():
    assert count_errors(generate_items(50, error_rate=0.0)) == 0
    items = generate_items(50, error_rate=1.0, rng=random.Random(7))
    assert count_errors(items) == 50


def test_generate_items_roughly_twenty_percent():
    items = generate_items(5000, rng=random.Random(42))
    ratio = count_errors(items) / len(items)
    assert 0.15 < ratio < 0.25


def test_utc_timestamp_millis():
    ts = utc_timestamp(datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc))
    assert ts == "2024-05-01T12:00:00.123Z"
