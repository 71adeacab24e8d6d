"""Table host package: wraps the table engine with networking."""

from .server import ClientSession, HostError, TableHost, TableSession

__all__ = ["ClientSession", "HostError", "TableHost", "TableSession"]
