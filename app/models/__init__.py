from .category import Category
from .engagement import CartItem, Review, WishlistItem
from .product import Product
from .product_details import AccessoriesDetails, ApparelDetails, MobileDetails
from .product_image import ProductImage
from .user import User


__all__ = [
    "AccessoriesDetails",
    "ApparelDetails",
    "CartItem",
    "Category",
    "MobileDetails",
    "Product",
    "ProductImage",
    "Review",
    "User",
    "WishlistItem",
]
