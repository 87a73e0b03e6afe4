import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from validapro.config import Settings, get_settings
from validapro.database.base import Base


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


def _is_memory_database(url) -> bool:
    sqlite_db = url.database
    if sqlite_db in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def build_engine(database_url: str) -> Engine:
    db_url = make_url(database_url)
    is_sqlite = db_url.get_backend_name() == "sqlite"
    is_sqlite_memory = is_sqlite and _is_memory_database(db_url)

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if is_sqlite_memory:
            engine_kwargs.update(poolclass=StaticPool)

    new_engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            if not is_sqlite_memory:
                # pysqlite defers BEGIN to the first DML; take over transaction start instead.
                dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
                if not is_sqlite_memory:
                    try:
                        cursor.execute("PRAGMA journal_mode=WAL")
                        cursor.execute("PRAGMA synchronous=NORMAL")
                    except sqlite3.DatabaseError:
                        pass
            finally:
                cursor.close()

    if is_sqlite and not is_sqlite_memory:
        @event.listens_for(new_engine, "begin")
        def _begin_immediate(connection):
            # Writers hold the database lock from their first read, so a
            # before-image read inside the transaction cannot go stale.
            connection.exec_driver_sql("BEGIN IMMEDIATE")

    return new_engine


engine = build_engine(app_settings.DATABASE_URL)


def init_db(bind: Engine = None) -> None:
    from validapro.models import import_all_models

    import_all_models()
    bind = bind if bind is not None else engine
    Base.metadata.create_all(bind=bind)
    logger.info("Database schema ready (%s)", bind.url.get_backend_name())
