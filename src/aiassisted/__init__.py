"""ai-assisted - copy-in conventions for AI coding assistants."""

__version__ = "0.1.0"
