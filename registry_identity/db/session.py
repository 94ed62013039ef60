"""Request-scoped database sessions."""

from typing import Generator

from sqlalchemy.orm import Session, sessionmaker

from registry_identity.db.engine import engine

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """Yield a session; a request that fails leaves no transaction open."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
