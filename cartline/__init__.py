"""
cartline - shopping cart domain model

Subpackages and modules:
- cart: line items, collection, storage drivers, Cart facade
- db: Redis client and key layout
- errors: exception taxonomy
- logging: logger configuration
- money: Decimal helpers

Note: Imports are lazy so that importing cartline.logging or cartline.money
does not pull in the Redis client.
"""

__all__ = [
    "Cart",
    "LineItem",
    "LineItemCollection",
    "ConfigurationError",
]


def __getattr__(name):
    """Lazy attribute access for the most used names."""
    if name == "Cart":
        from cartline.cart import Cart
        return Cart
    elif name == "LineItem":
        from cartline.cart import LineItem
        return LineItem
    elif name == "LineItemCollection":
        from cartline.cart import LineItemCollection
        return LineItemCollection
    elif name == "ConfigurationError":
        from cartline.errors import ConfigurationError
        return ConfigurationError
    raise AttributeError(f"module 'cartline' has no attribute '{name}'")
