"""Task tracker: a generic in-memory resource engine with a Task entity and HTTP API."""

from .core.config import VERSION

__version__ = VERSION
