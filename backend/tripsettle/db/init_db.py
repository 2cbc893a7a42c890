"""
Database initialization script.
"""
from tripsettle.core.logging import setup_logging
from tripsettle.db.session import init_db
import logging

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    setup_logging()
    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized successfully!")
