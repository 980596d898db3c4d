"""Page objects for the storefront."""

from .base_page import BasePage
from .cart_page import CartPage
from .checkout_complete_page import CheckoutCompletePage
from .checkout_page import CheckoutPage
from .inventory_page import InventoryPage
from .login_page import LoginPage

__all__ = [
    "BasePage",
    "CartPage",
    "CheckoutCompletePage",
    "CheckoutPage",
    "InventoryPage",
    "LoginPage",
]
