"""
Credential Manager

Loads test user credentials from a YAML file that is kept out of version
control. Copy ``config/credentials.example.yaml`` to ``config/credentials.yaml``
and fill in the passwords.
"""

import logging
from pathlib import Path

import yaml

from storefront_harness.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

EXAMPLE_CREDENTIALS_FILE = "credentials.example.yaml"

STANDARD_USER = "standard_user"
LOCKED_OUT_USER = "locked_out_user"


class CredentialManager:
    """Read-only store of username to password pairs."""

    def __init__(self, credentials_file: str | Path):
        self.credentials_file = Path(credentials_file)
        self._credentials = self._load_credentials()

    def _load_credentials(self) -> dict[str, str]:
        if not self.credentials_file.exists():
            logger.error(
                f"Credentials file not found. Please copy {EXAMPLE_CREDENTIALS_FILE} to "
                f"{self.credentials_file.name} and fill in the values."
            )
            raise ConfigurationError(
                f"Credentials file not found: {self.credentials_file}. "
                "Please check the setup instructions."
            )

        try:
            with open(self.credentials_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to load credentials: {e}") from e

        users = data.get("users") if isinstance(data, dict) else None
        if not isinstance(users, dict):
            raise ConfigurationError(
                f"Credentials file {self.credentials_file} must define a 'users' mapping"
            )

        logger.info("Credentials loaded successfully")
        # A blank YAML value means an empty password
        return {
            str(user): "" if password is None else str(password)
            for user, password in users.items()
        }

    def get_password(self, username: str) -> str:
        """
        Get the password for a user.

        Raises:
            ConfigurationError: If the user is not in the credentials file
        """
        if username not in self._credentials:
            logger.error(f"No password found for user: {username}")
            raise ConfigurationError(f"No password found for user: {username}")
        return self._credentials[username]

    def user_exists(self, username: str) -> bool:
        return username in self._credentials

    def available_users(self) -> list[str]:
        return list(self._credentials)
