"""Answer Cache Implementation.

Provides the in-memory implementation of the AnswerCache interface.
Bounded Context: Cache Management
"""
