"""API Resilience Implementations.

Contains the service that retries rate-limited provider calls with
exponential backoff.
Bounded Context: API Resilience
"""
