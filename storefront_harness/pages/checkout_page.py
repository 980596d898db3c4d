from typing import TYPE_CHECKING

from storefront_harness.pages.base_page import BasePage
from storefront_harness.pages.checkout_complete_page import CheckoutCompletePage

if TYPE_CHECKING:
    from storefront_harness.pages.inventory_page import InventoryPage


class CheckoutPage(BasePage):
    """Checkout step one (customer information) and step two (overview)."""

    first_name_input_selector = "#first-name"
    last_name_input_selector = "#last-name"
    postal_code_input_selector = "#postal-code"
    continue_button_selector = "#continue"
    error_message_selector = "[data-test='error']"

    finish_button_selector = "#finish"
    cancel_button_selector = "#cancel"
    summary_info_selector = ".summary_info"
    summary_total_selector = ".summary_total_label"

    def enter_customer_info(
        self, first_name: str, last_name: str, postal_code: str
    ) -> "CheckoutPage":
        self.session.fill_with_retry(self.first_name_input_selector, first_name, "first name")
        self.session.fill_with_retry(self.last_name_input_selector, last_name, "last name")
        self.session.fill_with_retry(self.postal_code_input_selector, postal_code, "postal code")
        return self

    def click_continue(self) -> "CheckoutPage":
        self.session.click_with_retry(self.continue_button_selector, "continue button")
        return self

    def get_error_message(self) -> str:
        return self.text_of(self.error_message_selector)

    def get_summary_total(self) -> str:
        return self.text_of(self.summary_total_selector)

    def is_checkout_overview_displayed(self) -> bool:
        return self.element_exists(self.finish_button_selector) and self.element_exists(
            self.summary_info_selector
        )

    def finish_checkout(self) -> CheckoutCompletePage:
        self.session.click_with_retry(self.finish_button_selector, "finish button")
        return CheckoutCompletePage(self.session)

    def cancel_checkout(self) -> "InventoryPage":
        """Cancel checkout and return to the inventory page."""
        from storefront_harness.pages.inventory_page import InventoryPage

        self.session.click_with_retry(self.cancel_button_selector, "cancel button")
        return InventoryPage(self.session)
