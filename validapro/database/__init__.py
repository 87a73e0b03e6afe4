from validapro.database.base import Base
from validapro.database.engine import build_engine, engine, init_db
from validapro.database.session import SessionLocal, get_db, session_scope

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "get_db", "init_db", "session_scope"]
