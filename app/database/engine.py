import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from app.config import Settings, get_settings


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


def _is_sqlite_memory(url) -> bool:
    if url.database in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def create_catalog_engine(
    database_url: str,
    *,
    pool_size: int = 5,
    max_overflow: int = 5,
    echo: bool = False,
) -> Engine:
    """Build an engine for ``database_url``.

    Server databases get a bounded pool, so at most ``pool_size + max_overflow``
    connections are open and every session (and therefore every write
    transaction) checks out one connection for itself. SQLite gets foreign key
    enforcement switched on for each new connection; in-memory SQLite shares a
    single connection so that every session sees the same database.
    """
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True, echo=echo)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if _is_sqlite_memory(url):
            engine_kwargs.update(poolclass=StaticPool)
    else:
        engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow)

    new_engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
            finally:
                cursor.close()

    return new_engine


engine = create_catalog_engine(
    app_settings.DATABASE_URL,
    pool_size=app_settings.DB_POOL_SIZE,
    max_overflow=app_settings.DB_MAX_OVERFLOW,
    echo=app_settings.DB_ECHO,
)


def init_schema(bind: Engine = engine) -> None:
    # Importing the models registers every table on Base.metadata.
    from app.database.base import Base
    from app.models import import_all_models

    import_all_models()
    Base.metadata.create_all(bind=bind)
    logger.info("Database schema ready (%s)", bind.url.get_backend_name())


__all__ = ["create_catalog_engine", "engine", "init_schema"]
