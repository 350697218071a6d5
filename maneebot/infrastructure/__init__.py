"""Infrastructure Layer: adapters for OpenAI, Discord, config and logging."""
