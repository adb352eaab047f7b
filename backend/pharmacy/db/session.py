"""Engine and session factory for the pharmacy database.

SQLite is the development default. It only honours ON DELETE SET NULL on the
sale/purchase -> medicine links when foreign keys are switched on per
connection, so every SQLite engine gets the pragma on connect.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from pharmacy.core.config import settings


def enable_sqlite_foreign_keys(engine: Engine) -> Engine:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def build_engine(url: str, **kwargs) -> Engine:
    """SQLite: no pooling, cross-thread connections, FK enforcement. Others: a bounded pool."""
    if url.startswith("sqlite"):
        kwargs.setdefault("poolclass", NullPool)
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        return enable_sqlite_foreign_keys(create_engine(url, connect_args=connect_args, **kwargs))

    kwargs.setdefault("pool_size", 5)
    kwargs.setdefault("max_overflow", 10)
    kwargs.setdefault("pool_recycle", 3600)
    return create_engine(url, pool_pre_ping=True, **kwargs)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
