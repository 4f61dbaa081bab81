"""Entity package: Book.

- Book / BookPayload / validate_book: wire models and field rules
- BookTable: database persistence model
- BookRepository: data access layer
"""

from .entity import Book, BookPayload, validate_book
from .repository import BookRepository
from .table import BookTable

__all__ = ["Book", "BookPayload", "BookRepository", "BookTable", "validate_book"]
