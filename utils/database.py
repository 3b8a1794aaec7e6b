"""Database engine and session helpers for the content store."""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from settings import Settings

logger = logging.getLogger(__name__)


def make_engine(settings: Settings) -> Engine:
    """Create an engine for ``settings.database_url``."""
    logger.debug("Connecting to %s", settings.database_url)
    return create_engine(settings.database_url)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Yield a session; roll back on error, always close."""
    factory = sessionmaker(bind=engine)
    session = factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
