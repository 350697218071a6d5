"""Core Application Layer: Orchestrates the /manee use case.

Connects the domain layer with the infrastructure layer through interfaces.
"""
