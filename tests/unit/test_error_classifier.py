"""
Unit tests for ignore-pattern noise filtering
"""

import pytest

from storefront_harness.core.error_classifier import ErrorClassifier
from storefront_harness.core.exceptions import ConfigurationError


class TestErrorClassifier:
    """Test ErrorClassifier.is_ignorable."""

    def test_favicon_is_ignorable(self, error_classifier):
        assert error_classifier.is_ignorable("https://www.saucedemo.com/favicon.ico")

    def test_checkout_api_is_not_ignorable(self, error_classifier):
        assert not error_classifier.is_ignorable("https://www.saucedemo.com/api/checkout")

    def test_analytics_beacon_is_ignorable(self, error_classifier):
        assert error_classifier.is_ignorable("https://events.backtrace.io/analytics/submit")

    def test_empty_pattern_set_ignores_nothing(self):
        classifier = ErrorClassifier([])

        assert not classifier.is_ignorable("https://example.com/favicon.ico")
        assert not classifier.is_ignorable("")

    def test_match_is_full_string(self):
        classifier = ErrorClassifier(["favicon"])

        assert not classifier.is_ignorable("https://example.com/favicon.ico")
        assert classifier.is_ignorable("favicon")

    def test_pattern_order_does_not_matter(self):
        text = "https://example.com/analytics/favicon.ico"
        forward = ErrorClassifier([".*favicon.ico.*", ".*analytics.*"])
        backward = ErrorClassifier([".*analytics.*", ".*favicon.ico.*"])

        assert forward.is_ignorable(text) == backward.is_ignorable(text) is True

    def test_console_message_matching(self, error_classifier):
        assert error_classifier.is_ignorable("Failed to load resource: status of 401 ()")
        assert not error_classifier.is_ignorable("Uncaught TypeError: x is undefined")

    def test_none_is_not_ignorable(self, error_classifier):
        assert not error_classifier.is_ignorable(None)

    def test_invalid_pattern_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="Invalid ignore pattern"):
            ErrorClassifier(["(unclosed"])

    def test_patterns_property(self):
        assert ErrorClassifier(["a", "b"]).patterns == ("a", "b")
