"""Interface for the answer cache.

Defines the contract for storing and retrieving answers keyed by the
exact question text.
"""

import abc
from typing import Optional

from ..models.common import Answer, Question

class AnswerCache(abc.ABC):
    """Abstract Base Class for answer caching."""

    @abc.abstractmethod
    def get(self, question: Question) -> Optional[Answer]:
        """Retrieves the cached answer for a question.

        Args:
            question: The question text, compared byte-for-byte.

        Returns:
            The cached answer, or None when the question was never answered.
        """
        pass

    @abc.abstractmethod
    def put(self, question: Question, answer: Answer) -> None:
        """Stores the answer for a question, replacing any previous one."""
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Removes every cached answer."""
        pass

    @abc.abstractmethod
    def __len__(self) -> int:
        pass

    def __contains__(self, question: object) -> bool:
        return isinstance(question, str) and self.get(Question(question)) is not None
