"""Entities module with hybrid entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model and validation rules
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .service.book import Book, BookRepository, BookTable, validate_book

__all__ = ["Book", "BookRepository", "BookTable", "validate_book"]
