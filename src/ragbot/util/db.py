from collections.abc import Generator
from contextlib import contextmanager

import structlog
from sqlalchemy import Engine, create_engine, make_url, text
from sqlalchemy.orm import Session, sessionmaker

_logger = structlog.get_logger()

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def configure_engine(database_url: str) -> Engine:
    """Create the process-wide engine behind :func:`get_session`.

    Calling it again disposes the previous engine first.
    """
    global _engine, _session_factory  # noqa: PLW0603
    dispose_engine()

    _engine = create_engine(database_url, pool_pre_ping=True)
    _session_factory = sessionmaker(_engine, expire_on_commit=False)
    _logger.info(
        "db_engine_configured",
        url=make_url(database_url).render_as_string(hide_password=True),
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Database engine not configured; call configure_engine() first")
    return _engine


@contextmanager
def get_session() -> Generator[Session, None, None]:
    if _session_factory is None:
        raise RuntimeError("Database engine not configured; call configure_engine() first")
    with _session_factory() as session:
        yield session


def init_db() -> None:
    """Create the ``documents`` table, enabling pgvector first on Postgres."""
    engine = get_engine()
    if engine.dialect.name == "postgresql":
        with engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))

    from ragbot.vectorstore.models import Base

    Base.metadata.create_all(engine)
    _logger.info("db_initialized", dialect=engine.dialect.name)


def dispose_engine() -> None:
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is None:
        return
    _engine.dispose()
    _engine = None
    _session_factory = None
    _logger.info("db_engine_disposed")
