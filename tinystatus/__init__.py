"""tinystatus — concurrent HTTP / ping / TCP checks rendered as a status page."""

__version__ = "0.1.0"
