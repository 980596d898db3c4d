"""
Storefront UI test harness.

Drives a browser through the storefront login, inventory, cart and checkout
flows, retrying flaky automation steps and recording network anomalies per test.
"""

__version__ = "0.1.0"
