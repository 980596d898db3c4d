from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storefront_harness.core.session_lifecycle import HarnessSession


def xpath_literal(text: str) -> str:
    """Quote a string for use inside an XPath expression."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


class BasePage:
    """Base class for page objects; actions go through the session's retrying helpers."""

    def __init__(self, session: "HarnessSession"):
        self.session = session
        self.context = session.context
        self.base_url = session.base_url

    def navigate_to_base_url(self) -> None:
        self.session.navigate_with_retry(self.base_url)

    def get_current_url(self) -> str:
        return self.context.current_url

    def element_exists(self, selector: str) -> bool:
        return self.context.element_exists(selector)

    def text_of(self, selector: str) -> str:
        """Text content of the first matching element, or an empty string."""
        return self.context.text_content(selector) or ""
