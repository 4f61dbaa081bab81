from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class TimestampedTable(SQLModel, table=False):
    """Base table with database-maintained creation and update timestamps.

    The timestamps belong to the storage layer only and are never exposed on
    the domain entities.
    """

    created_at: datetime | None = Field(
        default=None,
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
