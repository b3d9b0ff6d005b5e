"""Host introspection helpers for PE self service facts."""

__version__ = "1.0.0"
