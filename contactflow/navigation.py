"""Page navigation target used after a successful submission."""

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class Navigator:
    """Stands in for ``window.location``.

    ``navigate`` records the destination; ``history`` keeps every destination
    in order.
    """

    def __init__(self, location: Optional[str] = None) -> None:
        self.location = location
        self.history: List[str] = []

    def navigate(self, url: str) -> None:
        logger.info("Navigating to %s", url)
        self.location = url
        self.history.append(url)


__all__ = [
    "Navigator",
]
