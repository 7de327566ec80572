"""Chat history record models and terminal interface state."""

__version__ = "0.1.0"