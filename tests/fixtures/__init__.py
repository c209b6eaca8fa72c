"""Test fixture package for tntsearch.

Contains fixtures for:
- Database connections (temporary SQLite files)
- The FastAPI application and HTTP clients
"""

from .db import db_engine, db_session, db_session_factory, make_torrent

__all__ = [
    # Database
    "db_engine",
    "db_session",
    "db_session_factory",
    "make_torrent",
]
