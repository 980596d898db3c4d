"""
Fixtures for end-to-end runs against the live storefront.

One browser engine is started per pytest session; every test gets its own
browsing context, and the network anomalies it recorded are attached to the
test report.
"""

import pytest

from storefront_harness.core.credential_manager import STANDARD_USER, CredentialManager
from storefront_harness.core.session_lifecycle import SessionLifecycle
from storefront_harness.core.settings_manager import load_settings
from storefront_harness.utils.logging_setup import configure_logging


@pytest.fixture(scope="session")
def settings():
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings


@pytest.fixture(scope="session")
def lifecycle(settings):
    lifecycle = SessionLifecycle(settings)
    with lifecycle.suite():
        yield lifecycle


@pytest.fixture(scope="session")
def credentials(settings):
    return CredentialManager(settings.credentials_path)


@pytest.fixture
def harness(lifecycle, request):
    """Per-test session; its network ledger goes into the report's teardown section."""
    session = lifecycle.start_test(request.node.name)
    try:
        yield session
    finally:
        failed_requests = lifecycle.end_test(session)
        if failed_requests:
            request.node.add_report_section(
                "teardown",
                "network anomalies",
                "\n".join(str(failed) for failed in failed_requests),
            )
        request.node.user_properties.append(
            ("failed_requests", [failed.to_dict() for failed in failed_requests])
        )


@pytest.fixture
def valid_password(credentials):
    return credentials.get_password(STANDARD_USER)
