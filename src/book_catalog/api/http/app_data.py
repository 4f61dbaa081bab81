from dataclasses import dataclass

from book_catalog.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
