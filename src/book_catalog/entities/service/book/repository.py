"""Book repository for data access operations."""

import sqlalchemy as sa
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from book_catalog.core.exceptions import StoreError
from book_catalog.core.results import Failure, NotFound, StoreResult, Success

from .entity import Book
from .table import RATING_SCALE, BookTable


def _as_stored(book: Book) -> Book:
    """Round ``rating`` to the precision the column keeps."""
    return book.model_copy(update={"rating": round(book.rating, RATING_SCALE)})


def _to_entity(row: BookTable) -> Book:
    return Book(
        id=row.id,
        title=row.title,
        num_pages=row.num_pages,
        author=row.author,
        rating=row.rating,
    )


class BookRepository:
    """Data-access layer for the books table.

    Every method is a single statement in its own transaction and returns a
    :data:`StoreResult`; database errors are rolled back and reported as
    ``Failure`` rather than raised. Input is expected to have passed
    ``validate_book`` already.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _fail(self, operation: str, exc: SQLAlchemyError) -> Failure:
        self._session.rollback()
        logger.bind(operation=operation, error_type=type(exc).__name__).error(
            "Book store operation failed: {}", exc
        )
        return Failure(StoreError(operation, exc))

    def create(self, book: Book) -> StoreResult[Book]:
        """Insert ``book`` and return it with the store-assigned id."""
        book = _as_stored(book)
        row = BookTable(
            title=book.title,
            num_pages=book.num_pages,
            author=book.author,
            rating=book.rating,
        )
        try:
            self._session.add(row)
            self._session.flush()
            new_id = row.id
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("create", exc)

        return Success(book.model_copy(update={"id": new_id}))

    def get_all(self) -> StoreResult[list[Book]]:
        """Return every book, oldest id first."""
        statement = (
            select(BookTable)
            .order_by(BookTable.id)
            .execution_options(populate_existing=True)
        )
        try:
            rows = self._session.exec(statement).all()
        except SQLAlchemyError as exc:
            return self._fail("get_all", exc)

        return Success([_to_entity(row) for row in rows])

    def get_by_id(self, book_id: int) -> StoreResult[Book]:
        try:
            row = self._session.get(BookTable, book_id, populate_existing=True)
        except SQLAlchemyError as exc:
            return self._fail("get_by_id", exc)

        if row is None:
            return NotFound()
        return Success(_to_entity(row))

    def update(self, book_id: int, book: Book) -> StoreResult[Book]:
        """Replace every field except ``id`` on the row with ``book_id``."""
        book = _as_stored(book)
        books = BookTable.__table__
        statement = (
            sa.update(books)
            .where(books.c.id == book_id)
            .values(
                title=book.title,
                num_pages=book.num_pages,
                author=book.author,
                rating=book.rating,
            )
        )
        try:
            result = self._session.connection().execute(statement)
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("update", exc)

        # rowcount counts matched rows, unchanged ones included
        if result.rowcount == 0:
            return NotFound()
        return Success(book.model_copy(update={"id": book_id}))

    def delete(self, book_id: int) -> StoreResult[bool]:
        books = BookTable.__table__
        statement = sa.delete(books).where(books.c.id == book_id)
        try:
            result = self._session.connection().execute(statement)
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("delete", exc)

        if result.rowcount == 0:
            return NotFound()
        return Success(True)
