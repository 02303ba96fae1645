from .categories import Category
from .products import Product
from .profiles import Profile
from .reviews import Review

__all__ = ["Category", "Product", "Profile", "Review"]
