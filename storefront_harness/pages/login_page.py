from storefront_harness.pages.base_page import BasePage

INVENTORY_PATH = "/inventory.html"


class LoginPage(BasePage):
    """Login form of the storefront."""

    username_input_selector = "#user-name"
    password_input_selector = "#password"
    login_button_selector = "#login-button"
    error_message_selector = "[data-test='error']"

    def navigate_to_login_page(self) -> "LoginPage":
        self.navigate_to_base_url()
        return self

    def enter_username(self, username: str) -> "LoginPage":
        self.session.fill_with_retry(self.username_input_selector, username, "username")
        return self

    def enter_password(self, password: str) -> "LoginPage":
        self.session.fill_with_retry(self.password_input_selector, password, "password")
        return self

    def click_login_button(self) -> "LoginPage":
        self.session.click_with_retry(self.login_button_selector, "login button")
        return self

    def login(self, username: str, password: str) -> "LoginPage":
        self.enter_username(username)
        self.enter_password(password)
        self.click_login_button()
        return self

    def get_error_message(self) -> str:
        return self.text_of(self.error_message_selector)

    def get_password_field_type(self) -> str | None:
        return self.context.get_attribute(self.password_input_selector, "type")

    def is_login_successful(self) -> bool:
        return INVENTORY_PATH in self.get_current_url()

    def is_logged_in(self) -> bool:
        return self.is_login_successful()

    def is_on_login_page(self) -> bool:
        return self.element_exists(self.login_button_selector) and not self.is_login_successful()

    def reload(self) -> "LoginPage":
        self.session.navigate_with_retry(self.get_current_url())
        return self
