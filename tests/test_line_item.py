from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from gomarketplace.core.exceptions import CorruptPersistedData
from gomarketplace.domain.entities.line_item import (
    LineItem,
    ProductCandidate,
    coerce_candidate,
    dump_snapshot,
    parse_snapshot,
)

KEY = "@GoMarketplace:products"


def test_line_item_rejects_zero_quantity() -> None:
    with pytest.raises(ValidationError):
        LineItem(id="1", title="Shirt", price=50, quantity=0)


def test_line_item_is_immutable() -> None:
    item = LineItem(id="1", title="Shirt", price=50, quantity=1)

    with pytest.raises(ValidationError):
        item.quantity = 2


def test_with_quantity_returns_copy() -> None:
    item = LineItem(id="1", title="Shirt", price=50, quantity=1)

    bumped = item.with_quantity(4)

    assert bumped.quantity == 4
    assert item.quantity == 1
    with pytest.raises(ValueError):
        item.with_quantity(0)


def test_camel_case_image_url_is_accepted() -> None:
    candidate = coerce_candidate({"id": "1", "title": "Shirt", "imageUrl": "u.png", "price": 50})

    assert candidate.image_url == "u.png"
    assert candidate.to_dict() == {"id": "1", "title": "Shirt", "image_url": "u.png", "price": 50.0}


def test_coerce_candidate_drops_quantity_of_line_item() -> None:
    line = LineItem(id="1", title="Shirt", price=50, quantity=3)

    candidate = coerce_candidate(line)

    assert type(candidate) is ProductCandidate
    assert candidate.id == "1"


def test_snapshot_round_trip_keeps_order_and_precision() -> None:
    items = (
        LineItem(id="b", title="Ünïcode", image_url="x", price=0.1 + 0.2, quantity=3),
        LineItem(id="a", title="Plain", image_url="y", price=1234567.891, quantity=1),
    )

    raw = dump_snapshot(items)

    assert parse_snapshot(raw, KEY) == items
    assert "Ünïcode" in raw


@pytest.mark.parametrize(
    "raw, reason",
    [
        ("not json", "invalid JSON"),
        ('{"id": "1"}', "expected a list"),
        ("[1, 2]", "item 0 is not an object"),
        ('[{"id": "1", "title": "x", "price": 1}]', "item 0: quantity"),
        ('[{"id": "1", "title": "x", "price": 1, "quantity": -2}]', "item 0: quantity"),
        ('[{"id": "1", "title": "x", "price": "cheap", "quantity": 1}]', "item 0: price"),
    ],
)
def test_parse_snapshot_rejects_malformed_values(raw: str, reason: str) -> None:
    with pytest.raises(CorruptPersistedData) as exc_info:
        parse_snapshot(raw, KEY)

    assert reason in exc_info.value.reason
    assert exc_info.value.key == KEY


def test_parse_snapshot_rejects_duplicate_ids() -> None:
    raw = json.dumps(
        [
            {"id": "1", "title": "x", "price": 1, "quantity": 1},
            {"id": "1", "title": "x", "price": 1, "quantity": 2},
        ]
    )

    with pytest.raises(CorruptPersistedData, match="duplicate product id '1'"):
        parse_snapshot(raw, KEY)


def test_parse_empty_list() -> None:
    assert parse_snapshot("[]", KEY) == ()


def test_parse_snapshot_accepts_camel_case_image_url() -> None:
    raw = json.dumps([{"id": "1", "title": "Shirt", "imageUrl": "u.png", "price": 50, "quantity": 2}])

    (item,) = parse_snapshot(raw, KEY)

    assert item.image_url == "u.png"
    assert json.loads(dump_snapshot([item]))[0]["image_url"] == "u.png"
