import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for a test run; HARNESS_LOG_LEVEL overrides ``level``."""
    level_name = (os.getenv("HARNESS_LOG_LEVEL") or level or "INFO").upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        logging.getLogger(__name__).warning(f"Unknown log level '{level_name}', using INFO")
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric_level)

    # Selenium and urllib3 are chatty at DEBUG
    for noisy in ("selenium", "urllib3"):
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.INFO))
