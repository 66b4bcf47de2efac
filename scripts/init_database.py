#!/usr/bin/env python3
"""
Initialize database tables from SQLAlchemy models.

Creates the teams, players, matches and player_stats tables in the database
named by DATABASE_URL (a local SQLite file by default).
"""
import sys
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    """Create all database tables from models."""
    from app.core.database import DATABASE_URL, init_db

    logger.info(f"Creating database tables in {DATABASE_URL}...")
    init_db()
    logger.info("All database tables created")


if __name__ == "__main__":
    main()
