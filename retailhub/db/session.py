from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from retailhub.core.config import settings

class Base(DeclarativeBase): pass

def _sqlite_pragmas(engine: Engine) -> None:
    # pysqlite's own transaction handling is turned off so every transaction
    # starts with BEGIN IMMEDIATE; writers then queue on the database lock
    # instead of failing their upgrade from a shared lock.
    @event.listens_for(engine, 'connect')
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cur = dbapi_connection.cursor()
        cur.execute('PRAGMA foreign_keys=ON')
        cur.execute('PRAGMA case_sensitive_like=ON')
        cur.close()

    @event.listens_for(engine, 'begin')
    def _on_begin(conn):
        conn.exec_driver_sql('BEGIN IMMEDIATE')

def build_engine(dsn: str, echo: bool = False) -> Engine:
    if dsn.startswith('sqlite'):
        engine = create_engine(dsn, echo=echo, connect_args={'check_same_thread': False, 'timeout': 30})
        _sqlite_pragmas(engine)
        return engine
    return create_engine(dsn, echo=echo, pool_pre_ping=True)

def build_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

engine = build_engine(settings.DATABASE_DSN, echo=settings.SQL_ECHO)
SessionLocal = build_sessionmaker(engine)
