"""Entity: Book."""

from pydantic import BaseModel, ConfigDict, Field

MIN_RATING = 0.0
MAX_RATING = 5.0


class Book(BaseModel):
    """Book record as exchanged with clients.

    ``id`` is assigned by the store and stays 0 until the book is created.
    Field rules live in :func:`validate_book`, which reports every violation
    at once.
    """

    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True, strict=True)

    id: int = Field(default=0, description="Store-assigned identifier")
    title: str = Field(default="", description="Title")
    num_pages: int = Field(default=0, alias="numPages", description="Number of pages")
    author: str = Field(default="", description="Author")
    rating: float = Field(default=0.0, description="Rating between 0 and 5")


class BookPayload(Book):
    """Request body for create and update: wire names only."""

    model_config = ConfigDict(validate_by_name=False)


def validate_book(book: Book) -> dict[str, str]:
    """Return a mapping of field name to error message, empty when valid.

    Fields are checked independently and keyed by their wire names.
    """
    errors: dict[str, str] = {}

    if book.title == "":
        errors["title"] = "Title is required"

    if book.author == "":
        errors["author"] = "Author is required"

    if book.num_pages < 0:
        errors["numPages"] = "Number of pages cannot be negative"

    # NaN fails both comparisons
    if not MIN_RATING <= book.rating <= MAX_RATING:
        errors["rating"] = "Rating must be between 0 and 5"

    return errors
