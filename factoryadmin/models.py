"""Passive records mirroring the REST backend's JSON documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from flask_login import UserMixin


TRANSACTION_TYPES: tuple[str, ...] = ("IN", "OUT", "ADJUSTMENT")


def _record_id(payload: Mapping[str, Any]) -> str:
    raw = payload.get("_id", payload.get("id"))
    return "" if raw is None else str(raw)


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class Ref:
    """Embedded reference to another document (populated or bare id)."""

    id: str = ""
    name: str = ""
    sku: str = ""

    @classmethod
    def from_api(cls, payload: Any) -> Optional["Ref"]:
        if payload is None or payload == "":
            return None
        if isinstance(payload, Mapping):
            return cls(
                id=_record_id(payload),
                name=payload.get("name") or "",
                sku=payload.get("sku") or "",
            )
        return cls(id=str(payload))


@dataclass(frozen=True)
class Role:
    id: str
    name: str
    description: str = ""
    permissions: frozenset[str] = frozenset()

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Role":
        return cls(
            id=_record_id(payload),
            name=payload.get("name") or "",
            description=payload.get("description") or "",
            permissions=frozenset(payload.get("permissions") or ()),
        )

    def grants(self, permission: str) -> bool:
        return permission in self.permissions

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "description": self.description,
            "permissions": sorted(self.permissions),
        }


@dataclass
class Identity(UserMixin):
    """The signed-in user as issued by ``POST /users/login``."""

    id: str
    name: str
    email: str
    role: Optional[Role] = None
    token: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Identity":
        role_payload = payload.get("role")
        role = Role.from_api(role_payload) if isinstance(role_payload, Mapping) else None
        return cls(
            id=_record_id(payload),
            name=payload.get("name") or "",
            email=payload.get("email") or "",
            role=role,
            token=payload.get("token") or "",
        )

    from_api = from_dict

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.to_dict() if self.role else None,
            "token": self.token,
        }

    def get_id(self) -> str:
        return self.id

    @property
    def permissions(self) -> frozenset[str]:
        if self.role is None:
            return frozenset()
        return self.role.permissions


@dataclass(frozen=True)
class UserAccount:
    """A user row as listed on the user management page."""

    id: str
    name: str
    email: str
    role: Optional[Ref] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "UserAccount":
        return cls(
            id=_record_id(payload),
            name=payload.get("name") or "",
            email=payload.get("email") or "",
            role=Ref.from_api(payload.get("role")),
        )


@dataclass(frozen=True)
class Catalog:
    id: str
    name: str
    code: str = ""

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Catalog":
        return cls(
            id=_record_id(payload),
            name=payload.get("name") or "",
            code=payload.get("code") or "",
        )


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    code: str = ""
    description: str = ""

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Category":
        return cls(
            id=_record_id(payload),
            name=payload.get("name") or "",
            code=payload.get("code") or "",
            description=payload.get("description") or "",
        )


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    sku: str
    description: str = ""
    category: Optional[Ref] = None
    catalog: Optional[Ref] = None
    unit_price: Decimal = Decimal("0")
    cost_price: Decimal = Decimal("0")
    stock_quantity: int = 0
    images: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Product":
        return cls(
            id=_record_id(payload),
            name=payload.get("name") or "",
            sku=payload.get("sku") or "",
            description=payload.get("description") or "",
            category=Ref.from_api(payload.get("category")),
            catalog=Ref.from_api(payload.get("catalog")),
            unit_price=_to_decimal(payload.get("unitPrice")),
            cost_price=_to_decimal(payload.get("costPrice")),
            stock_quantity=_to_int(payload.get("stockQuantity")),
            images=tuple(payload.get("images") or ()),
        )

    @property
    def stock_value(self) -> Decimal:
        return self.cost_price * self.stock_quantity

    @property
    def category_name(self) -> str:
        return self.category.name if self.category and self.category.name else "Uncategorized"

    @property
    def catalog_name(self) -> str:
        return self.catalog.name if self.catalog and self.catalog.name else "-"


@dataclass(frozen=True)
class StockTransaction:
    id: str
    type: str
    quantity: int
    product: Optional[Ref] = None
    user: Optional[Ref] = None
    reason: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "StockTransaction":
        return cls(
            id=_record_id(payload),
            type=(payload.get("type") or "").upper(),
            quantity=_to_int(payload.get("quantity")),
            product=Ref.from_api(payload.get("product")),
            user=Ref.from_api(payload.get("user")),
            reason=payload.get("reason") or "",
            created_at=_parse_timestamp(payload.get("createdAt")),
        )


@dataclass(frozen=True)
class InventoryReport:
    products: tuple[Product, ...] = ()
    total_items: int = 0
    low_stock_count: int = 0
    total_stock_value: Decimal = Decimal("0")

    @classmethod
    def from_api(cls, payload: Mapping[str, Any], *, low_stock_threshold: int = 10) -> "InventoryReport":
        """Build the report, deriving any statistic the backend did not send."""

        products = tuple(Product.from_api(entry) for entry in payload.get("products") or ())
        stats = payload.get("stats") or {}

        total_items = stats.get("totalItems")
        low_stock = stats.get("lowStockCount")
        stock_value = stats.get("totalStockValue")
        return cls(
            products=products,
            total_items=len(products) if total_items is None else _to_int(total_items),
            low_stock_count=(
                sum(1 for product in products if product.stock_quantity < low_stock_threshold)
                if low_stock is None
                else _to_int(low_stock)
            ),
            total_stock_value=(
                sum((product.stock_value for product in products), Decimal("0"))
                if stock_value is None
                else _to_decimal(stock_value)
            ),
        )


@dataclass(frozen=True)
class Page:
    """One page of results from a list endpoint."""

    items: tuple[Any, ...] = ()
    page: int = 1
    pages: int = 1
    total: int = 0

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


__all__ = [
    "Catalog",
    "Category",
    "Identity",
    "InventoryReport",
    "Page",
    "Product",
    "Ref",
    "Role",
    "StockTransaction",
    "TRANSACTION_TYPES",
    "UserAccount",
]
