from .db_manage import DbManageService, bootstrap
from .db_session import DbSessionService, build_engine

__all__ = ["DbManageService", "DbSessionService", "bootstrap", "build_engine"]
