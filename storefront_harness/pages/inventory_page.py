import logging

from selenium.webdriver.common.by import By

from storefront_harness.inventory.inventory_validator import (
    ItemSnapshot,
    ValidationReport,
    select_cheapest,
    select_most_expensive,
    validate_inventory_prices,
)
from storefront_harness.pages.base_page import BasePage, xpath_literal
from storefront_harness.pages.cart_page import CartPage

logger = logging.getLogger(__name__)


class InventoryPage(BasePage):
    """Product listing shown after login."""

    inventory_item_selector = ".inventory_item"
    item_name_selector = ".inventory_item_name"
    item_price_selector = ".inventory_item_price"
    cart_badge_selector = ".shopping_cart_badge"
    cart_link_selector = ".shopping_cart_link"

    def get_item_snapshot(self) -> ItemSnapshot:
        """
        Read every inventory item's name and raw price text from the DOM.

        Returns:
            Ordered (name, raw price) pairs; the price is None if the item has no price element
        """
        snapshot = []
        for item in self.context.query_selector_all(self.inventory_item_selector):
            names = item.find_elements(By.CSS_SELECTOR, self.item_name_selector)
            if not names:
                logger.warning("Inventory item without a name element skipped")
                continue
            name = (names[0].get_attribute("textContent") or "").strip()

            prices = item.find_elements(By.CSS_SELECTOR, self.item_price_selector)
            raw_price = prices[0].get_attribute("textContent") if prices else None
            snapshot.append((name, raw_price))
        return snapshot

    def validate_prices(self) -> ValidationReport:
        return validate_inventory_prices(self.get_item_snapshot())

    def get_all_items_with_prices(self) -> dict[str, float]:
        """Names and prices of items whose price is valid, in page order."""
        return dict(self.validate_prices().valid_prices)

    def get_most_expensive_item(self) -> tuple[str, float]:
        return select_most_expensive(self.get_item_snapshot())

    def get_cheapest_item(self) -> tuple[str, float]:
        return select_cheapest(self.get_item_snapshot())

    def add_item_to_cart_by_name(self, item_name: str) -> None:
        add_button_selector = (
            f"//*[text()={xpath_literal(item_name)}]"
            "/ancestor::div[contains(@class,'inventory_item')]"
            "//button[contains(@id,'add-to-cart')]"
        )
        self.session.click_with_retry(add_button_selector, f"add to cart for '{item_name}'")

    def get_cart_item_count(self) -> int:
        badge = self.context.text_content(self.cart_badge_selector)
        if badge is None or not badge.strip():
            return 0
        return int(badge.strip())

    def navigate_to_cart(self) -> CartPage:
        self.session.click_with_retry(self.cart_link_selector, "cart link")
        return CartPage(self.session)

    def add_most_expensive_item_to_cart(self) -> str:
        """Add the most expensive item to the cart and return its name."""
        name, _ = self.get_most_expensive_item()
        self.add_item_to_cart_by_name(name)
        return name

    def add_cheapest_item_to_cart(self) -> str:
        """Add the cheapest item to the cart and return its name."""
        name, _ = self.get_cheapest_item()
        self.add_item_to_cart_by_name(name)
        return name
