from storefront_harness.pages.base_page import BasePage


class CheckoutCompletePage(BasePage):
    """Order confirmation page."""

    complete_header_selector = ".complete-header"
    complete_text_selector = ".complete-text"
    back_home_button_selector = "#back-to-products"

    def get_complete_header_text(self) -> str:
        self.context.wait_for_selector(self.complete_header_selector)
        return self.text_of(self.complete_header_selector)

    def get_complete_text(self) -> str:
        return self.text_of(self.complete_text_selector)

    def is_order_confirmation_displayed(self) -> bool:
        return self.element_exists(self.complete_header_selector) and self.element_exists(
            self.complete_text_selector
        )
