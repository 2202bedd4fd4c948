"""
Random assignment of new tickets to the support team.
"""

import random
import threading
from typing import Optional, Sequence

from ..utils.logger import get_logger


class AssigneeSelector:
    """
    Picks one support team member uniformly at random.

    The roster is copied to a tuple at construction and never changes.
    Pass a seeded ``random.Random`` for deterministic selection.
    """

    def __init__(self, roster: Sequence[str], rng: Optional[random.Random] = None):
        self.roster = tuple(roster)
        self._rng = rng or random.Random()
        # Shared by all concurrent requests
        self._lock = threading.Lock()
        self.logger = get_logger()

    def select(self) -> str:
        """
        Select an assignee.

        Returns:
            A roster entry, or "" when the roster is empty (ticket stays unassigned)
        """
        if not self.roster:
            return ""

        with self._lock:
            index = self._rng.randrange(len(self.roster))

        selected = self.roster[index]
        self.logger.debug(f"Randomly selected team member {index + 1} of {len(self.roster)}: {selected}")
        return selected
