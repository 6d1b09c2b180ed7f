"""A small threaded chat server with nicknames and slash commands."""

__version__ = "0.1.0"
__all__ = ["registry", "session", "server"]