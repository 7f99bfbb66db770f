"""Task API - CRUD service for tasks with an optional Redis read-through cache."""

__version__ = "0.1.0"
__all__ = ["__version__"]
