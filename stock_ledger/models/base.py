"""
Storage handle, session management, and base model.

The engine and session factory are built explicitly by
create_session_factory() and owned by whoever calls it (the
application factory, a test fixture, a script). Every service
receives its Session at construction.
"""

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


def create_session_factory(
    database_url: str,
    lock_timeout: float = 10.0,
    echo: bool = False,
) -> sessionmaker:
    """
    Build an engine and a session factory bound to it.

    autocommit=False and autoflush=False leave the transaction
    boundary with the caller: nothing reaches the database until
    an explicit flush or commit.

    For SQLite, the busy timeout is set to lock_timeout so a writer
    waiting on another writer fails instead of hanging.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": lock_timeout,
        }

    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=echo,
    )
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db(request: Request):
    """
    Provide a database session for a single request.

    The session comes from the factory the application was built
    with. The try/finally guarantees the session is closed even if
    the endpoint raises.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
