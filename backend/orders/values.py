"""
Value objects carried by order items.

Ingredient and extra lines are stored on OrderItem as JSON lists. Each stored
line is the dict produced by IngredientLine.to_dict(), tagged with the schema
version so older rows can be recognised if the layout ever changes.

Everything that enters the ledger from a client passes through
OrderItemInput.from_dict(), so malformed payloads fail with ValidationError
before any row is written.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Tuple
import json
import uuid

from core_backend.exceptions import ValidationError

INGREDIENT_SCHEMA_VERSION = 1

KITCHEN_STATUSES = ("new", "preparing", "ready", "delivered")


def _decimal(value, field_name, allow_negative=False) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    if number < 0 and not allow_negative:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


@dataclass(frozen=True)
class IngredientLine:
    name: str
    quantity: Decimal = Decimal("0")
    unit: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IngredientLine":
        if isinstance(data, str):
            # Bare names are accepted for extras picked from a list.
            data = {"name": data}
        if not isinstance(data, dict):
            raise ValidationError(f"Ingredient line must be an object, got {type(data).__name__}")

        version = data.get("v", INGREDIENT_SCHEMA_VERSION)
        if version != INGREDIENT_SCHEMA_VERSION:
            raise ValidationError(f"Unsupported ingredient schema version {version!r}")

        name = data.get("name", data.get("ingredient"))
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Ingredient line needs a name")

        unit = data.get("unit") or ""
        return cls(
            name=name.strip(),
            quantity=_decimal(data.get("quantity"), "Ingredient quantity"),
            unit=str(unit).strip(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "v": INGREDIENT_SCHEMA_VERSION,
            "name": self.name,
            "quantity": str(self.quantity),
            "unit": self.unit,
        }


def parse_lines(value) -> Tuple[IngredientLine, ...]:
    """Accept a list of line dicts, a JSON string of one, or None."""
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Ingredient list is not valid JSON: {e}")
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Ingredient list must be an array")
    return tuple(IngredientLine.from_dict(line) for line in value)


def dump_lines(lines: Iterable[IngredientLine]) -> List[Dict[str, Any]]:
    return [line.to_dict() for line in lines]


@dataclass(frozen=True)
class OrderItemInput:
    """One order line as sent by a terminal."""

    unique_id: str
    quantity: int
    price: Optional[Decimal] = None
    name: str = ""
    product_id: Optional[int] = None
    ingredients: Tuple[IngredientLine, ...] = field(default_factory=tuple)
    extras: Tuple[IngredientLine, ...] = field(default_factory=tuple)
    note: str = ""
    confirmed: bool = False
    paid: bool = False
    kitchen_status: str = "new"
    payment_method: Optional[str] = None
    receipt_id: Optional[uuid.UUID] = None
    discount_type: Optional[str] = None
    discount_value: Decimal = Decimal("0")

    @property
    def initial_kitchen_status(self) -> str:
        # Billed but unpaid lines always start at the beginning of the kitchen flow.
        if self.confirmed and not self.paid:
            return "new"
        return self.kitchen_status

    @classmethod
    def from_dict(cls, data: Dict[str, Any], receipt_id=None) -> "OrderItemInput":
        if isinstance(data, OrderItemInput):
            return data
        if not isinstance(data, dict):
            raise ValidationError("Order item must be an object")

        unique_id = str(data.get("unique_id") or uuid.uuid4())
        if len(unique_id) > 64:
            raise ValidationError("unique_id is longer than 64 characters")

        try:
            quantity = int(data.get("quantity", 1))
        except (TypeError, ValueError):
            raise ValidationError(f"Quantity must be an integer, got {data.get('quantity')!r}")
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")

        product_id = data.get("product_id")
        if product_id in ("", None):
            product_id = None
        else:
            try:
                product_id = int(product_id)
            except (TypeError, ValueError):
                raise ValidationError(f"product_id must be an integer, got {product_id!r}")

        name = data.get("name") or ""
        if product_id is None and not name:
            raise ValidationError("Order item needs a product_id or a name")

        kitchen_status = data.get("kitchen_status") or "new"
        if kitchen_status not in KITCHEN_STATUSES:
            raise ValidationError(f"Invalid kitchen status {kitchen_status!r}")

        raw_receipt = data.get("receipt_id") or receipt_id
        return cls(
            unique_id=unique_id,
            quantity=quantity,
            price=None if data.get("price") in (None, "") else _decimal(data["price"], "Price"),
            name=str(name),
            product_id=product_id,
            ingredients=parse_lines(data.get("ingredients")),
            extras=parse_lines(data.get("extras")),
            note=data.get("note") or "",
            confirmed=bool(data.get("confirmed", False)),
            paid=bool(data.get("paid_at")),
            kitchen_status=kitchen_status,
            payment_method=data.get("payment_method") or None,
            receipt_id=parse_receipt_id(raw_receipt),
            discount_type=data.get("discount_type", data.get("discountType")) or None,
            discount_value=_decimal(
                data.get("discount_value", data.get("discountValue")), "Discount value"
            ),
        )


def parse_receipt_id(value) -> Optional[uuid.UUID]:
    if value in (None, ""):
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid receipt id {value!r}")
