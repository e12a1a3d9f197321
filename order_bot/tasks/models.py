"""
Pydantic models for call-to-order reconciliation.

The pipeline moves through these shapes:
- ToolEvent: one (tool name, arguments) pair pulled out of a transcript
- *Args: typed arguments for each tool the voice agent can call
- DraftOrder / DraftOrderItem: the cart folded from the events, not yet priced
- CatalogItem: read-only snapshot of one orderable menu item
- ResolvedOrderItem: a draft item matched against the catalog and priced
"""

from dataclasses import dataclass
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ToolEvent(BaseModel):
    """A single tool invocation; sequence position in the transcript matters."""
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


# ----- Tool argument schemas -----
#
# Only the field an event is about (item_name, order_type, address) can
# reject it. Everything else degrades: scalars become text, junk becomes
# None or an empty list.

def _as_text(v: Any) -> Optional[str]:
    """Trimmed text for a scalar argument, None for anything else."""
    if isinstance(v, str):
        return v.strip()
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return None


class ModifierSelection(BaseModel):
    """A chosen modifier option on an item, with its surcharge."""
    group: str = ""
    option: str = ""
    price: float = 0.0

    @field_validator("group", "option", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> str:
        return _as_text(v) or ""

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, v: Any) -> float:
        try:
            price = float(v)
        except (TypeError, ValueError):
            return 0.0
        return price if price > 0 else 0.0


class AddToOrderArgs(BaseModel):
    item_name: str = Field(min_length=1)
    quantity: int = 1
    modifiers: list[ModifierSelection] = Field(default_factory=list)
    special_instructions: Optional[str] = None

    @field_validator("item_name", mode="before")
    @classmethod
    def _name_text(cls, v: Any) -> Any:
        text = _as_text(v)
        return v if text is None else text

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, v: Any) -> int:
        # Missing, zero, junk or negative quantities all mean "one of them"
        try:
            quantity = int(float(v))
        except (TypeError, ValueError, OverflowError):
            return 1
        return quantity if quantity > 0 else 1

    @field_validator("modifiers", mode="before")
    @classmethod
    def _keep_mapping_modifiers(cls, v: Any) -> list:
        if not isinstance(v, list):
            return []
        return [m for m in v if isinstance(m, dict)]

    @field_validator("special_instructions", mode="before")
    @classmethod
    def _instructions_text(cls, v: Any) -> Optional[str]:
        return _as_text(v) or None


class RemoveFromOrderArgs(BaseModel):
    item_name: str = Field(min_length=1)

    @field_validator("item_name", mode="before")
    @classmethod
    def _name_text(cls, v: Any) -> Any:
        text = _as_text(v)
        return v if text is None else text


class SetOrderTypeArgs(BaseModel):
    order_type: Literal["pickup", "delivery"]

    @field_validator("order_type", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class SetDeliveryAddressArgs(BaseModel):
    address: str = Field(min_length=1)

    @field_validator("address", mode="before")
    @classmethod
    def _address_text(cls, v: Any) -> Any:
        text = _as_text(v)
        return v if text is None else text


class SetCustomerInfoArgs(BaseModel):
    """Each field is independent; one unusable value never discards the other."""
    name: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name", "phone", mode="before")
    @classmethod
    def _text_or_none(cls, v: Any) -> Optional[str]:
        return _as_text(v) or None


class GetOrderSummaryArgs(BaseModel):
    pass


TOOL_ARG_SCHEMAS: dict[str, type[BaseModel]] = {
    "add_to_order": AddToOrderArgs,
    "remove_from_order": RemoveFromOrderArgs,
    "set_order_type": SetOrderTypeArgs,
    "set_delivery_address": SetDeliveryAddressArgs,
    "set_customer_info": SetCustomerInfoArgs,
    "get_order_summary": GetOrderSummaryArgs,
}


# ----- Draft order -----

class DraftOrderItem(BaseModel):
    """An item as spoken; `name` stays raw until matched against the catalog."""
    name: str
    quantity: int = 1
    modifiers: list[ModifierSelection] = Field(default_factory=list)
    special_instructions: Optional[str] = None

    @property
    def modifier_total(self) -> float:
        return sum(m.price for m in self.modifiers)


class DraftOrder(BaseModel):
    order_type: Literal["pickup", "delivery"] = "pickup"
    items: list[DraftOrderItem] = Field(default_factory=list)
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    delivery_address: Optional[str] = None

    @property
    def is_delivery(self) -> bool:
        return self.order_type == "delivery"


# ----- Catalog and priced items -----

@dataclass(frozen=True)
class CatalogItem:
    """Immutable snapshot of a menu item taken once per reconciliation."""
    id: int
    name: str
    base_price: float


class ResolvedOrderItem(BaseModel):
    """A draft item after catalog matching; menu_item_id None means unresolved."""
    menu_item_id: Optional[int] = None
    name: str
    quantity: int
    unit_price: float
    modifiers: list[ModifierSelection] = Field(default_factory=list)
    item_total: float
    special_instructions: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.menu_item_id is not None
