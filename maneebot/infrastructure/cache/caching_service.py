"""In-memory implementation of the AnswerCache interface.

Answers live for the lifetime of the process: no TTL, no persistence.
An optional item bound turns the store into a least-recently-used cache.
"""

import logging
from collections import OrderedDict
from typing import Optional

# Domain Layer Imports
from maneebot.domain.interfaces.cache import AnswerCache
from maneebot.domain.models.common import Answer, Question

logger = logging.getLogger(__name__)

class InMemoryAnswerCache(AnswerCache):
    """Exact-match question -> answer store."""

    def __init__(self, max_items: Optional[int] = None):
        """Initializes the cache.

        Args:
            max_items: Optional upper bound. When set, the least recently
                used answer is evicted once the bound is exceeded. None
                means unbounded.
        """
        if max_items is not None and max_items < 1:
            raise ValueError("max_items must be >= 1 or None")
        self._entries: "OrderedDict[Question, Answer]" = OrderedDict()
        self.max_items = max_items
        logger.info(f"InMemoryAnswerCache initialized (max_items={max_items or 'unbounded'})")

    def get(self, question: Question) -> Optional[Answer]:
        answer = self._entries.get(question)
        if answer is not None and self.max_items is not None:
            self._entries.move_to_end(question)
        return answer

    def put(self, question: Question, answer: Answer) -> None:
        self._entries[question] = answer
        self._entries.move_to_end(question)
        self._evict()

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Answer cache cleared ({count} entries removed).")

    def __len__(self) -> int:
        return len(self._entries)

    def _evict(self) -> None:
        """Drops least recently used entries while over the bound."""
        if self.max_items is None:
            return
        while len(self._entries) > self.max_items:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cached answer for: {evicted!r}")
