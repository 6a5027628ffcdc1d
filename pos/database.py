# pos/database.py

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from pos.core.config import settings


Base = declarative_base()

# Execution option asking SQLite to open the transaction with BEGIN IMMEDIATE
SQLITE_IMMEDIATE = "sqlite_immediate"


def _configure_sqlite(engine: Engine):
    # Foreign keys are off by default in SQLite. Writers take the write lock
    # at BEGIN so two of them cannot deadlock on lock promotion; readers
    # keep a deferred BEGIN and never queue behind a checkout.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(SQLITE_IMMEDIATE):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    SQLite engines get foreign key enforcement and serialized write
    transactions; every other backend is used as configured.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.SQLITE_BUSY_TIMEOUT,
            },
        )
        _configure_sqlite(engine)
        return engine

    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def begin_write(db: Session) -> None:
    """Open ``db``'s next transaction as a write transaction.

    Does nothing if a transaction is already open. Backends other than
    SQLite ignore the option.
    """
    if not db.in_transaction():
        db.connection(execution_options={SQLITE_IMMEDIATE: True})


def get_db():
    """Dependency to get a DB session for a request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_write_db():
    """Dependency for requests that modify data."""
    db = SessionLocal()
    try:
        begin_write(db)
        yield db
    finally:
        db.close()
