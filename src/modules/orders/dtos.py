"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``OrderItemDTO``: a single line item (name, quantity, unit price).
- ``ReplaceOrderItemsDTO``: a full replacement item set.
- ``CreateOrderDTO``: owner + initial item set.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import MAX_ITEM_QUANTITY, PRODUCT_NAME_MAX_LENGTH
from shared.domain import money

MIN_UNIT_PRICE = Decimal("0.01")


class OrderItemDTO(BaseModel):
    """Immutable DTO for one order line item.

    ``unit_price`` must arrive as ``Decimal``, ``int`` or a numeric string
    with at most two fraction digits; ``float`` is rejected.
    """

    model_config = ConfigDict(frozen=True)

    product_name: str
    quantity: int
    unit_price: Decimal

    @field_validator("product_name")
    @classmethod
    def product_name_must_be_present(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Product name is required for each item.")
        if len(v) > PRODUCT_NAME_MAX_LENGTH:
            raise ValueError(
                f"Product name must not exceed {PRODUCT_NAME_MAX_LENGTH} characters."
            )
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        if v > MAX_ITEM_QUANTITY:
            raise ValueError(f"Quantity must not exceed {MAX_ITEM_QUANTITY}.")
        return v

    @field_validator("unit_price", mode="before")
    @classmethod
    def unit_price_must_be_fixed_point(cls, v: Any) -> Decimal:
        try:
            return money.to_money(v)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("unit_price")
    @classmethod
    def unit_price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v < MIN_UNIT_PRICE:
            raise ValueError("Unit price must be at least 0.01.")
        return v

    @model_validator(mode="after")
    def subtotal_must_fit(self) -> "OrderItemDTO":
        if self.subtotal > money.MAX_AMOUNT:
            raise ValueError(f"Item subtotal must not exceed {money.MAX_AMOUNT}.")
        return self

    @property
    def subtotal(self) -> Decimal:
        return money.multiply(self.quantity, self.unit_price)


class ReplaceOrderItemsDTO(BaseModel):
    """Immutable DTO for a wholesale item-set replacement.

    Validates that ``items`` contains at least one item and that the
    resulting total fits the ``total_amount`` column.
    """

    model_config = ConfigDict(frozen=True)

    items: List[OrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(cls, v: List[OrderItemDTO]) -> List[OrderItemDTO]:
        if not v:
            raise ValueError("At least one order item is required.")
        return v

    @model_validator(mode="after")
    def total_must_fit(self) -> "ReplaceOrderItemsDTO":
        if self.total_amount > money.MAX_AMOUNT:
            raise ValueError(f"Order total must not exceed {money.MAX_AMOUNT}.")
        return self

    @property
    def total_amount(self) -> Decimal:
        return money.total(item.subtotal for item in self.items)


class CreateOrderDTO(ReplaceOrderItemsDTO):
    """Immutable DTO for order creation requests."""

    owner_id: int
