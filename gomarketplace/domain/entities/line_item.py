"""Cart line item entities and snapshot encoding."""
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from gomarketplace.core.constants import MIN_QUANTITY
from gomarketplace.core.exceptions import CorruptPersistedData


class ProductCandidate(BaseModel):
    """Product as handed to the cart, before it has a quantity."""

    id: str = Field(..., description="Product ID, unique within the cart")
    title: str = Field(..., description="Display title")
    image_url: str = Field(
        "",
        validation_alias=AliasChoices("image_url", "imageUrl"),
        description="Display image URL",
    )
    price: float = Field(..., description="Unit price")

    class Config:
        """Pydantic config."""
        frozen = True
        populate_by_name = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "image_url": self.image_url,
            "price": self.price,
        }


class LineItem(ProductCandidate):
    """One distinct product in the cart."""

    quantity: int = Field(..., ge=MIN_QUANTITY, description="Units of this product in the cart")

    @classmethod
    def from_candidate(cls, candidate: ProductCandidate, quantity: int = MIN_QUANTITY) -> LineItem:
        return cls(
            id=candidate.id,
            title=candidate.title,
            image_url=candidate.image_url,
            price=candidate.price,
            quantity=quantity,
        )

    def with_quantity(self, quantity: int) -> LineItem:
        """Copy of this line with another quantity."""
        if quantity < MIN_QUANTITY:
            raise ValueError(f"Line item quantity must be >= {MIN_QUANTITY}, got {quantity}")
        return self.model_copy(update={"quantity": quantity})

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["quantity"] = self.quantity
        return data


CandidateLike = Union[ProductCandidate, Mapping[str, Any]]


def coerce_candidate(item: CandidateLike) -> ProductCandidate:
    """Accept a candidate, a line item or a plain mapping of candidate fields."""
    if isinstance(item, LineItem):
        return ProductCandidate.model_validate(item.to_dict())
    if isinstance(item, ProductCandidate):
        return item
    return ProductCandidate.model_validate(dict(item))


def dump_snapshot(items: Iterable[LineItem]) -> str:
    """Serialize the whole cart as one JSON array."""
    return json.dumps([item.to_dict() for item in items], ensure_ascii=False)


def parse_snapshot(raw: str, key: str) -> tuple[LineItem, ...]:
    """Parse a stored snapshot.

    Raises:
        CorruptPersistedData: value is not a JSON array of valid line items
            with unique ids. No partial result is returned.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CorruptPersistedData(key, f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorruptPersistedData(key, f"expected a list, got {type(data).__name__}")

    items: list[LineItem] = []
    seen: set[str] = set()
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise CorruptPersistedData(key, f"item {index} is not an object")
        try:
            item = LineItem.model_validate(entry)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise CorruptPersistedData(key, f"item {index}: {location} {first['msg']}") from e
        if item.id in seen:
            raise CorruptPersistedData(key, f"duplicate product id {item.id!r}")
        seen.add(item.id)
        items.append(item)

    return tuple(items)
