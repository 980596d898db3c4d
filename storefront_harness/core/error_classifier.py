"""
Noise filtering for network and console events.

Known-benign requests (favicons, analytics beacons, expected 401s) are matched
against a set of ignore patterns so they never reach the failure ledger.
"""

import logging
import re
from collections.abc import Iterable

from storefront_harness.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ErrorClassifier:
    """Decides whether a URL or message is known noise."""

    def __init__(self, patterns: Iterable[str] = ()):
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise ConfigurationError(f"Invalid ignore pattern '{pattern}': {e}") from e
        self._patterns: tuple[re.Pattern, ...] = tuple(compiled)

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(p.pattern for p in self._patterns)

    def is_ignorable(self, text: str) -> bool:
        """
        Check whether the whole of ``text`` matches any ignore pattern.

        An empty pattern set ignores nothing.
        """
        if text is None:
            return False
        for pattern in self._patterns:
            if pattern.fullmatch(text):
                return True
        return False

    def __repr__(self) -> str:
        return f"ErrorClassifier(patterns={list(self.patterns)!r})"
