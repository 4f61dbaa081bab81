"""Error types shared by the persistence layer and the HTTP edge."""


class StoreError(Exception):
    """A database operation failed.

    Carries the repository operation name and the underlying driver or
    SQLAlchemy error so callers can log it without re-raising.
    """

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class BootstrapError(Exception):
    """The database or books table could not be created at startup."""

    def __init__(self, step: str, cause: BaseException | str) -> None:
        super().__init__(f"Bootstrap failed to {step}: {cause}")
        self.step = step
        self.cause = cause


class BookValidationError(Exception):
    """A book failed field validation; ``errors`` maps field name to message."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Validation failed")
        self.errors = errors
