import logging

from app.db.session import engine
from app.db.base import Base
import app.db.models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


def init_db(bind=None):
    """Create any missing tables."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")
