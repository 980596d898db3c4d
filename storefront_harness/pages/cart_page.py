from selenium.webdriver.common.by import By

from storefront_harness.core.exceptions import ValidationError
from storefront_harness.inventory.inventory_validator import (
    ItemSnapshot,
    select_most_expensive,
    validate_inventory_prices,
)
from storefront_harness.pages.base_page import BasePage, xpath_literal
from storefront_harness.pages.checkout_page import CheckoutPage


class CartPage(BasePage):
    """Shopping cart listing."""

    cart_item_selector = ".cart_item"
    item_name_selector = ".inventory_item_name"
    item_price_selector = ".inventory_item_price"
    checkout_button_selector = "#checkout"

    def get_cart_snapshot(self) -> ItemSnapshot:
        snapshot = []
        for item in self.context.query_selector_all(self.cart_item_selector):
            name = item.find_element(By.CSS_SELECTOR, self.item_name_selector)
            prices = item.find_elements(By.CSS_SELECTOR, self.item_price_selector)
            raw_price = prices[0].get_attribute("textContent") if prices else None
            snapshot.append(((name.get_attribute("textContent") or "").strip(), raw_price))
        return snapshot

    def get_cart_items(self) -> dict[str, float]:
        """
        Names and prices of the items in the cart.

        Raises:
            ValidationError: If an item in the cart has a missing or malformed price
        """
        report = validate_inventory_prices(self.get_cart_snapshot())
        if report.missing_items:
            raise ValidationError(
                f"Cart items with missing or invalid prices: {', '.join(report.missing_items)}",
                report,
            )
        return dict(report.valid_prices)

    def is_item_in_cart(self, item_name: str) -> bool:
        return item_name in self.get_cart_items()

    def get_item_price(self, item_name: str) -> float | None:
        return self.get_cart_items().get(item_name)

    def remove_item_by_name(self, item_name: str) -> None:
        remove_button_selector = (
            f"//*[text()={xpath_literal(item_name)}]"
            "/ancestor::div[contains(@class,'cart_item')]"
            "//button[contains(@id,'remove-')]"
        )
        self.session.click_with_retry(remove_button_selector, f"remove for '{item_name}'")

    def remove_most_expensive_item(self) -> str | None:
        """Remove the most expensive cart item; returns its name, or None for an empty cart."""
        snapshot = self.get_cart_snapshot()
        if not snapshot:
            return None
        name, _ = select_most_expensive(snapshot)
        self.remove_item_by_name(name)
        return name

    def get_cart_item_count(self) -> int:
        return len(self.context.query_selector_all(self.cart_item_selector))

    def proceed_to_checkout(self) -> CheckoutPage:
        self.session.click_with_retry(self.checkout_button_selector, "checkout button")
        return CheckoutPage(self.session)
