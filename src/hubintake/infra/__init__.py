"""Infrastructure connections (DB) and SQL-backed stores."""

from hubintake.infra.database import close_db, get_engine, get_session, init_db
from hubintake.infra.models import HubRow, ItemRow, SessionRow
from hubintake.infra.stores import SQLHubStore, SQLItemStore, SQLSessionStore

__all__ = [
    # DB
    "init_db",
    "close_db",
    "get_engine",
    "get_session",
    # Models
    "HubRow",
    "SessionRow",
    "ItemRow",
    # Stores
    "SQLHubStore",
    "SQLSessionStore",
    "SQLItemStore",
]
