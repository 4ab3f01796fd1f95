"""Database engine and session management.

Use explicit imports: ``from app.db.postgres import get_async_session``.
"""
