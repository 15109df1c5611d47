"""A small single-process IRC server with channels, operators and invitations."""

__version__ = "0.1.0"
__all__ = ["channel", "client", "commands", "server"]