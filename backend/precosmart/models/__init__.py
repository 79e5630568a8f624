from .organization import Organization
from .user import User
from .membership import Membership
from .category import ItemCategory, ProductCategory
from .item import Item
from .product import Product, ProductItemLine
from .price_history import ItemPriceHistory, ProductPriceHistory

__all__ = [
    "Organization",
    "User",
    "Membership",
    "ItemCategory",
    "ProductCategory",
    "Item",
    "Product",
    "ProductItemLine",
    "ItemPriceHistory",
    "ProductPriceHistory",
]
