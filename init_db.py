#!/usr/bin/env python3
"""
Initialize database tables (local development; production uses the Alembic revisions)
"""
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.core.config import settings
from app.core.database import create_tables, engine

if __name__ == "__main__":
    print(f"Creating database tables on {engine.url.render_as_string(hide_password=True)}...")
    create_tables()
    print(f"Database initialization complete! Rate limit: {settings.RATE_LIMIT_MAX_SUBMISSIONS} per {settings.RATE_LIMIT_WINDOW_MINUTES} minutes")
