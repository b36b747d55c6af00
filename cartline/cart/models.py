"""Cart line item model with Decimal-based pricing."""
import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cartline.errors import ConfigurationError, ERROR_INVALID_MODEL_REF
from cartline.money import to_decimal, multiply, add
from .resolvers import get_image_resolver, DEFAULT_IMAGE_RESOLVER


class ModelRef(BaseModel):
    """Pointer to an external catalog/user record by id and type.

    The record itself is never loaded or kept; looking it up is the host
    application's job.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    external_id: str = Field(alias="externalId", min_length=1)
    external_type: str = Field(alias="externalType", min_length=1)

    @classmethod
    def coerce(cls, value: Any) -> Optional["ModelRef"]:
        """
        Normalize a model reference given in any accepted shape.

        Accepts a ModelRef, a mapping ({externalId, externalType},
        {external_id, external_type} or the legacy {id, class}) or an object
        exposing an ``id`` attribute.

        Returns:
            ModelRef, or None for None / an empty mapping

        Raises:
            ConfigurationError: If no id/type pair can be extracted
        """
        if value is None:
            return None
        if isinstance(value, ModelRef):
            return value

        if isinstance(value, Mapping):
            if not value:
                return None
            for id_key, type_key in (
                ("externalId", "externalType"),
                ("external_id", "external_type"),
                ("id", "class"),
            ):
                if id_key in value and type_key in value:
                    return cls.from_pair(value[id_key], value[type_key], value)
            raise ConfigurationError(
                f"{ERROR_INVALID_MODEL_REF}: got keys {sorted(value)}",
                code="INVALID_MODEL_REF",
            )

        external_id = getattr(value, "id", None)
        if external_id is None:
            raise ConfigurationError(
                f"{ERROR_INVALID_MODEL_REF}: {type(value).__name__} has no id",
                code="INVALID_MODEL_REF",
            )
        model_cls = type(value)
        return cls.from_pair(external_id, f"{model_cls.__module__}.{model_cls.__qualname__}", value)

    @classmethod
    def from_pair(cls, external_id: Any, external_type: Any, raw: Any = None) -> "ModelRef":
        if external_id is None or external_type is None:
            raise ConfigurationError(ERROR_INVALID_MODEL_REF, code="INVALID_MODEL_REF", raw_error=raw)
        try:
            return cls(external_id=str(external_id), external_type=str(external_type))
        except ValidationError as e:
            raise ConfigurationError(ERROR_INVALID_MODEL_REF, code="INVALID_MODEL_REF", raw_error=e) from e

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


def generate_item_key(product_id: str, meta_data: Mapping) -> str:
    """Identity hash of a product id and its metadata.

    Metadata is serialized in insertion order, so {"a": 1, "b": 2} and
    {"b": 2, "a": 1} are different variants.
    """
    payload = str(product_id) + json.dumps(meta_data, default=str, separators=(",", ":"))
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def validate_quantity(quantity: int) -> None:
    """Raise ValueError unless quantity is a positive integer (bools excluded)."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError("quantity must be a positive integer")


@dataclass
class LineItem:
    """One product/variant in the cart."""
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int = 1
    tax_rate: Decimal = Decimal("0")
    model: Optional[ModelRef] = None
    meta_data: dict = field(default_factory=dict)
    image: Optional[str] = None
    image_resolver: Optional[str] = None
    group: str = ""
    callback: str = ""
    item_key: str = field(init=False)

    def __post_init__(self):
        self.product_id = str(self.product_id)
        self.unit_price = to_decimal(self.unit_price)
        self.tax_rate = to_decimal(self.tax_rate)
        self.meta_data = dict(self.meta_data or {})
        self.group = self.group or ""
        self.callback = self.callback or ""
        self.model = ModelRef.coerce(self.model)

        if self.unit_price < 0:
            raise ValueError("unit_price must be a non-negative number")
        validate_quantity(self.quantity)

        self.item_key = generate_item_key(self.product_id, self.meta_data)

    def price_excluding_tax(self) -> Decimal:
        return self.unit_price

    def price_including_tax(self) -> Decimal:
        return multiply(self.unit_price, add(1, self.tax_rate))

    def price(self, exclude_tax: bool = True) -> Decimal:
        """Unit price, tax excluded unless asked otherwise."""
        if exclude_tax:
            return self.price_excluding_tax()
        return self.price_including_tax()

    def total(self, exclude_tax: bool = True) -> Decimal:
        """Unit price times quantity, tax excluded unless asked otherwise."""
        return multiply(self.price(exclude_tax), self.quantity)

    def set_meta_data(self, meta_data: dict) -> None:
        # item_key keeps the variant the item was created with
        self.meta_data = dict(meta_data)

    def set_group(self, group: str) -> None:
        self.group = group or ""

    def resolve_image(self) -> str:
        """
        Resolve the display image through the configured resolver.

        Raises:
            ConfigurationError: If the resolver is unknown or does not
                implement ImageResolver
        """
        resolver = get_image_resolver(self.image_resolver or DEFAULT_IMAGE_RESOLVER)
        return resolver.resolve(self)

    def to_dict(self) -> dict:
        """Convert to a flat storage record (item_key is not stored)."""
        return {
            "id": self.product_id,
            "name": self.name,
            "price": str(self.unit_price),
            "quantity": self.quantity,
            "taxRate": str(self.tax_rate),
            "metaData": dict(self.meta_data),
            "model": self.model.to_dict() if self.model else None,
            "image": self.image,
            "imageResolver": self.image_resolver,
            "group": self.group,
            "callback": self.callback,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from a storage record; item_key is recomputed."""
        return cls(
            product_id=data["id"],
            name=data["name"],
            unit_price=to_decimal(data["price"]),
            quantity=int(data.get("quantity", 1)),
            tax_rate=to_decimal(data.get("taxRate", 0)),
            model=data.get("model"),
            meta_data=data.get("metaData") or {},
            image=data.get("image"),
            image_resolver=data.get("imageResolver"),
            group=data.get("group") or "",
            callback=data.get("callback") or "",
        )
