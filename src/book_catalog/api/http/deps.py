"""FastAPI dependency implementations."""

from __future__ import annotations

import re
from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from book_catalog.api.http.app_data import ApplicationDependencies
from book_catalog.entities.service.book import BookRepository

_BOOK_ID_PATTERN = re.compile(r"[+-]?\d+")
_MAX_BOOK_ID = 2**63 - 1


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a request-scoped session from the shared engine."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    with app_deps.database_service.session_scope() as session:
        yield session


def get_book_repository(db: Session = Depends(get_db_session)) -> BookRepository:
    return BookRepository(db)


def parse_book_id(book_id: str) -> int:
    """Parse the ``book_id`` path segment, rejecting anything but an integer."""
    if not _BOOK_ID_PATTERN.fullmatch(book_id):
        raise HTTPException(status_code=400, detail="Invalid book ID")
    value = int(book_id)
    # Must fit a signed 64-bit column
    if not -_MAX_BOOK_ID - 1 <= value <= _MAX_BOOK_ID:
        raise HTTPException(status_code=400, detail="Invalid book ID")
    return value
