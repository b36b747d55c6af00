"""Image resolvers for line items.

A resolver turns a line item into a displayable image URL/path. Resolvers
are registered by name and referenced from items by that name, so the
reference survives a storage round-trip.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Union

from cartline.errors import (
    ConfigurationError,
    ERROR_IMAGE_RESOLVER_INVALID,
    ERROR_IMAGE_RESOLVER_NOT_FOUND,
)
from cartline.logging import get_logger

if TYPE_CHECKING:
    from .models import LineItem

logger = get_logger(__name__)

DEFAULT_IMAGE_RESOLVER = "default"


class ImageResolver(ABC):
    """Capability every image resolver implements."""

    @abstractmethod
    def resolve(self, item: "LineItem") -> str:
        """Return the image for the given item ("" when there is none)."""


# Registry of image resolvers
# Key: name stored on the item (imageResolver)
# Value: resolver class (instantiated per lookup) or ready instance
_RESOLVER_REGISTRY: dict[str, Union[type, object]] = {}


def register_image_resolver(name: str):
    """Decorator to register an image resolver class under a name."""

    def decorator(resolver_class):
        _RESOLVER_REGISTRY[name] = resolver_class
        logger.debug(f"Registered image resolver '{name}': {resolver_class!r}")
        return resolver_class

    return decorator


def get_image_resolver(name: str) -> ImageResolver:
    """Get resolver instance registered under ``name``.

    Raises:
        ConfigurationError: If the name is unknown or the registered object
            does not implement ImageResolver
    """
    entry = _RESOLVER_REGISTRY.get(name)
    if entry is None:
        available = list(_RESOLVER_REGISTRY.keys())
        raise ConfigurationError(
            f"{ERROR_IMAGE_RESOLVER_NOT_FOUND}: {name}. Available: {available}",
            code="IMAGE_RESOLVER_NOT_FOUND",
        )

    resolver = entry() if isinstance(entry, type) else entry
    if not isinstance(resolver, ImageResolver):
        raise ConfigurationError(
            f"{ERROR_IMAGE_RESOLVER_INVALID}: {name}",
            code="IMAGE_RESOLVER_INVALID",
        )
    return resolver


def available_image_resolvers() -> list[str]:
    return list(_RESOLVER_REGISTRY.keys())


@register_image_resolver(DEFAULT_IMAGE_RESOLVER)
class DefaultImageResolver(ImageResolver):
    """Returns the image stored on the item."""

    def resolve(self, item: "LineItem") -> str:
        return item.image or ""
