from ..database import Base
from .metadata import Store, Category
from .sales import Product, Sale

__all__ = [
    "Base",
    # Dimensions
    "Store", "Category",
    # Products
    "Product",
    # Sales facts
    "Sale",
]
