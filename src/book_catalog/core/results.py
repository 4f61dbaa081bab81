"""Tagged outcomes returned by repositories.

A repository call resolves to exactly one of:

- ``Success(value)``: the operation completed and produced ``value``
- ``NotFound()``: the operation completed but no matching row exists
- ``Failure(error)``: the store rejected the operation or was unreachable

"Not found" is an ordinary outcome, never an exception, so handlers can tell
an absent record apart from a broken database.
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

from book_catalog.core.exceptions import StoreError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Failure:
    error: StoreError


StoreResult: TypeAlias = Success[T] | NotFound | Failure
