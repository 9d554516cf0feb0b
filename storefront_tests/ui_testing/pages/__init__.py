"""
================================================================================
Page Objects
================================================================================

Page controllers for the storefront journeys.

Each page class encapsulates:
    - LocatorChain constants (primary + fallbacks)
    - Page-specific operations built on the interaction engine
    - Read-only state queries used by the tests

Author: Automation Team
License: MIT
================================================================================
"""

from .home_page import HomePage
from .login_page import LoginPage
from .register_page import RegisterPage
from .category_page import CategoryPage
from .men_page import MenPage
from .women_page import WomenPage
from .sale_page import SalePage
from .wishlist_page import WishlistPage
from .cart_page import CartPage

__all__ = [
    "HomePage",
    "LoginPage",
    "RegisterPage",
    "CategoryPage",
    "MenPage",
    "WomenPage",
    "SalePage",
    "WishlistPage",
    "CartPage",
]
