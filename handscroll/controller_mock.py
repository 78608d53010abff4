"""
Mock controller implementation for testing gesture commands.
"""
import logging
from typing import List

logger = logging.getLogger(__name__)


class MockController:
    """Mock controller that logs and records scrolls instead of executing them."""

    def __init__(self):
        """Initialize the mock controller."""
        self.scroll_count = 0
        self.scrolls: List[float] = []

    async def scroll(self, dy_px: float) -> None:
        """Record scroll command instead of executing it."""
        self.scroll_count += 1
        self.scrolls.append(dy_px)
        logger.info("[MockController] Scroll: dy_px=%s (call #%d)", dy_px, self.scroll_count)

    @property
    def total_dy(self) -> float:
        """Net vertical offset applied so far."""
        return sum(self.scrolls)

    def reset_counters(self) -> None:
        """Reset action counters for testing."""
        self.scroll_count = 0
        self.scrolls.clear()
