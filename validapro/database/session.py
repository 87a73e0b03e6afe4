from contextlib import contextmanager

from sqlalchemy.orm import Session, sessionmaker

from validapro.database.engine import engine

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(factory=None):
    """Session for work outside a request (startup, scripts).

    Services commit their own work; anything left pending when an error
    escapes is rolled back.
    """
    db: Session = (factory or SessionLocal)()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
