"""Book database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from book_catalog.entities._base import TimestampedTable

RATING_SCALE = 2


class BookTable(TimestampedTable, table=True):
    """Database persistence model for books.

    ``title`` and ``author`` carry secondary indexes for lookups; ``rating``
    is stored as DECIMAL(3,2) and read back as a float.
    """

    __tablename__ = "books"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(max_length=255, index=True)
    num_pages: int = Field(
        default=0, sa_column_kwargs={"server_default": sa.text("0")}
    )
    author: str = Field(max_length=255, index=True)
    rating: float = Field(
        default=0.0,
        sa_type=sa.Numeric(3, RATING_SCALE, asdecimal=False),
        sa_column_kwargs={"server_default": sa.text("0.00")},
    )
