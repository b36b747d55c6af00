"""Cart facade: merge-on-add, totals and write-through persistence."""
from decimal import Decimal
from typing import Optional

from cartline.logging import get_logger, short_key
from cartline.money import round_money
from .callbacks import get_callback
from .collection import LineItemCollection
from .models import LineItem, validate_quantity
from .storage import StorageDriver, MemoryDriver

logger = get_logger(__name__)


class Cart:
    """
    Shopping cart bound to one storage key and one storage driver.

    The cart is hydrated from the driver on construction and every mutating
    call writes the full item list back before returning (last write wins).
    Use one instance per session/request; it is not safe for concurrent
    mutation.

    Usage:
        cart = Cart("cart:42", driver=RedisDriver())
        cart.add(LineItem("sku-1", "Coffee", Decimal("10"), tax_rate=Decimal("0.1")))
        cart.total()  # Decimal("11.0")
    """

    def __init__(self, storage_key: str = "cart", driver: Optional[StorageDriver] = None):
        self.storage_key = storage_key
        self.driver = driver if driver is not None else MemoryDriver()
        self._items = self._load()

    def _load(self) -> LineItemCollection:
        return LineItemCollection.from_list(self.driver.get(self.storage_key))

    # =====================================================
    # COMMANDS
    # =====================================================
    def add(self, item: LineItem) -> None:
        """
        Add an item, merging it into an existing entry with the same key.

        On merge only the quantity accumulates; the existing entry keeps its
        price, metadata and group.
        """
        existing_item = self._items.find_by_item_key(item.item_key)

        if existing_item:
            logger.info(
                f"Item {short_key(item.item_key)} already in cart, "
                f"quantity {existing_item.quantity} -> {existing_item.quantity + item.quantity}"
            )
            existing_item.quantity += item.quantity
        else:
            logger.info(f"Adding item {short_key(item.item_key)} ({item.product_id})")
            self._items.push(item)

        self.save()

    def update(self, item_key: str, quantity: int = 1, meta_data: Optional[dict] = None) -> None:
        """
        Overwrite the quantity of an item, and its metadata when given.

        An empty/None ``meta_data`` leaves metadata untouched. Unknown keys
        are ignored; the cart is persisted either way.

        Raises:
            ValueError: If quantity is not a positive integer
        """
        validate_quantity(quantity)

        existing_item = self._items.find_by_item_key(item_key)

        if existing_item:
            existing_item.quantity = quantity
            if meta_data:
                existing_item.set_meta_data(meta_data)
        else:
            logger.debug(f"Update skipped, item {short_key(item_key)} not in cart")

        self.save()

    def remove(self, item_key: str) -> None:
        removed = self._items.remove_where(lambda item: item.item_key == item_key)
        logger.info(f"Removed {removed} item(s) with key {short_key(item_key)}")
        self.save()

    def clear(self) -> None:
        self._items = LineItemCollection()
        self.save(run_callbacks=False)

    def save(self, run_callbacks: bool = True) -> None:
        """
        Persist the cart through the driver.

        Raises:
            ConfigurationError: If an item's callback cannot be resolved;
                nothing is written in that case
        """
        if run_callbacks:
            self._run_callbacks()

        self.driver.save(self.storage_key, self._items.to_list())

    def _run_callbacks(self) -> None:
        # Resolve every reference before any hook runs
        pending = [
            (get_callback(item.callback), item)
            for item in self._items.all()
            if item.callback != ""
        ]
        for callback, item in pending:
            callback(item, self)

    # =====================================================
    # QUERIES
    # =====================================================
    def items(self, group: Optional[str] = None) -> LineItemCollection:
        """
        The live item collection, or a filtered copy for one group.

        Changing items of the live collection directly skips merge rules;
        call ``save()`` afterwards to persist such changes.
        """
        if group is not None:
            return self._items.filter_by_group(group)

        return self._items

    def total(self, exclude_tax: bool = False) -> Decimal:
        return self._items.reduce(lambda total, item: total + item.total(exclude_tax), Decimal("0"))

    def total_by_group(self, group: str, exclude_tax: bool = False) -> Decimal:
        return self._items.filter_by_group(group).reduce(
            lambda total, item: total + item.total(exclude_tax), Decimal("0")
        )

    def total_items(self) -> int:
        return self._items.reduce(lambda total, item: total + item.quantity, 0)

    def total_items_by_group(self, group: str) -> int:
        return self._items.filter_by_group(group).reduce(lambda total, item: total + item.quantity, 0)

    def is_empty(self) -> bool:
        return self._items.is_empty()

    def summary(self) -> dict:
        """
        Cart summary for display (API responses, templates, bot messages).

        Money values are rounded to cents; use ``total()`` for exact values.
        """
        if self.is_empty():
            return {
                "is_empty": True,
                "total_items": 0,
                "items": [],
                "groups": {},
                "subtotal": Decimal("0.00"),
                "total": Decimal("0.00"),
            }

        return {
            "is_empty": False,
            "total_items": self.total_items(),
            "items": [
                {
                    "item_key": item.item_key,
                    "product_id": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit_price": round_money(item.price_excluding_tax()),
                    "total": round_money(item.total(exclude_tax=False)),
                    "group": item.group,
                    "image": item.resolve_image(),
                }
                for item in self._items
            ],
            "groups": {
                group: {
                    "total_items": self.total_items_by_group(group),
                    "subtotal": round_money(self.total_by_group(group, exclude_tax=True)),
                    "total": round_money(self.total_by_group(group)),
                }
                for group in self._items.groups()
            },
            "subtotal": round_money(self.total(exclude_tax=True)),
            "total": round_money(self.total()),
        }
