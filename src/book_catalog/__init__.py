"""Book catalog service: a FastAPI CRUD API over a relational books table."""

__version__ = "0.1.0"
