"""
Delete expired auth sessions.
Run: python -m scripts.reap_expired_tokens
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.session import SessionLocal
from app.services.auth_service import reap_expired_tokens
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    db = SessionLocal()
    try:
        deleted = reap_expired_tokens(db)
        logger.info(f"Removed {deleted} expired auth sessions")
    finally:
        db.close()


if __name__ == "__main__":
    main()
