"""Book API router with CRUD operations."""

from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Response

from book_catalog.api.http.deps import get_book_repository, parse_book_id
from book_catalog.core.exceptions import BookValidationError
from book_catalog.core.results import Failure, NotFound, StoreResult, Success
from book_catalog.entities.service.book import (
    Book,
    BookPayload,
    BookRepository,
    validate_book,
)

T = TypeVar("T")

router = APIRouter(prefix="/api/books", tags=["books"])


def _ensure_valid(book: Book) -> None:
    errors = validate_book(book)
    if errors:
        raise BookValidationError(errors)


def _unwrap(result: StoreResult[T], failure_detail: str) -> T:
    """Map a repository outcome to its value or the matching HTTP error."""
    if isinstance(result, Success):
        return result.value
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail="Book not found")
    if isinstance(result, Failure):
        raise HTTPException(status_code=500, detail=failure_detail) from result.error
    raise TypeError(f"Unexpected repository result: {result!r}")


@router.post("", response_model=Book, status_code=201)
def create_book(
    book: BookPayload,
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Create a new book."""
    _ensure_valid(book)
    return _unwrap(repository.create(book), "Failed to create book")


@router.get("", response_model=list[Book])
def list_books(
    repository: BookRepository = Depends(get_book_repository),
) -> list[Book]:
    """List all books, oldest first."""
    return _unwrap(repository.get_all(), "Failed to retrieve books")


@router.get("/{book_id}", response_model=Book)
def get_book(
    book_id: int = Depends(parse_book_id),
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Get a book by ID."""
    return _unwrap(repository.get_by_id(book_id), "Failed to retrieve book")


@router.put("/{book_id}", response_model=Book)
def update_book(
    book: BookPayload,
    book_id: int = Depends(parse_book_id),
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Replace every field of a book except its ID."""
    _ensure_valid(book)
    return _unwrap(repository.update(book_id, book), "Failed to update book")


@router.delete("/{book_id}", status_code=204, response_class=Response)
def delete_book(
    book_id: int = Depends(parse_book_id),
    repository: BookRepository = Depends(get_book_repository),
) -> Response:
    """Delete a book."""
    _unwrap(repository.delete(book_id), "Failed to delete book")
    return Response(status_code=204)
