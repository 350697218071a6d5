"""maneebot: a Discord slash-command bot that answers questions with OpenAI."""

__version__ = "1.0.0"
