"""Domain Layer: value objects, interfaces, events and exceptions."""
