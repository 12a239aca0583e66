"""Database initialization utilities."""

import logging

from sqlalchemy.engine import Engine

from taskdesk.db.base import Base
from taskdesk.models import Task  # noqa: F401 - ensures models are registered

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create all database tables and indexes."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


if __name__ == "__main__":
    from taskdesk.core.logging import setup_logging
    from taskdesk.core.settings import get_settings
    from taskdesk.db.base import create_db_engine

    settings = get_settings()
    setup_logging(settings.log_level)
    init_db(create_db_engine(settings.database_url))
