"""
Order wire format — camelCase JSON as the order API expects it.

    {"customerName": "...", "email": "...", "phone": "...", "location": "...",
     "paymentMethod": "cash",
     "items": [{"productId": "...", "name": "...", "color": "...",
                "size": "M", "price": 20.0, "quantity": 2}],
     "total": 58.59}

Amounts are JSON numbers on the wire and Decimal everywhere else. Lines
stored in the orders table keep prices as decimal strings ("19.990").
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from storefront.checkout._types import OrderLine, OrderPayload, PaymentMethod

WireMoney = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderLineModel(_Camel):
    product_id: str
    name: str
    color: str
    size: str
    price: WireMoney = Field(gt=0)
    quantity: int = Field(default=1, ge=1)

    @classmethod
    def from_domain(cls, line: OrderLine) -> Self:
        return cls(
            product_id=line.product_id,
            name=line.name,
            color=line.color,
            size=line.size,
            price=line.price,
            quantity=line.quantity,
        )

    def to_domain(self) -> OrderLine:
        return OrderLine(
            product_id=self.product_id,
            name=self.name,
            color=self.color,
            size=self.size,
            price=self.price,
            quantity=self.quantity,
        )


class StoredOrderLine(OrderLineModel):
    """Order line as kept in the orders table; price is an exact decimal string."""

    price: Decimal = Field(gt=0)


class OrderPayloadModel(_Camel):
    customer_name: str
    email: str
    phone: str = ""
    location: str = ""
    payment_method: PaymentMethod
    items: list[OrderLineModel]
    total: WireMoney

    @classmethod
    def from_domain(cls, payload: OrderPayload) -> OrderPayloadModel:
        return cls(
            customer_name=payload.customer_name,
            email=payload.email,
            phone=payload.phone,
            location=payload.location,
            payment_method=payload.payment_method,
            items=[OrderLineModel.from_domain(line) for line in payload.items],
            total=payload.total,
        )

    def to_domain(self) -> OrderPayload:
        return OrderPayload(
            customer_name=self.customer_name,
            email=self.email,
            phone=self.phone,
            location=self.location,
            payment_method=self.payment_method,
            items=tuple(line.to_domain() for line in self.items),
            total=self.total,
        )


def payload_to_wire(payload: OrderPayload) -> dict[str, Any]:
    return OrderPayloadModel.from_domain(payload).model_dump(by_alias=True, mode="json")


def payload_from_wire(data: dict[str, Any]) -> OrderPayload:
    """
    Parse an incoming payload.

    Raises:
        pydantic.ValidationError: malformed payload.
    """
    return OrderPayloadModel.model_validate(data).to_domain()


def lines_to_record(lines: tuple[OrderLine, ...]) -> list[dict[str, Any]]:
    return [
        StoredOrderLine.from_domain(line).model_dump(by_alias=True, mode="json")
        for line in lines
    ]


def lines_from_record(data: list[dict[str, Any]]) -> tuple[OrderLine, ...]:
    return tuple(StoredOrderLine.model_validate(d).to_domain() for d in data)


__all__ = (
    "OrderLineModel",
    "StoredOrderLine",
    "OrderPayloadModel",
    "payload_to_wire",
    "payload_from_wire",
    "lines_to_record",
    "lines_from_record",
)
