"""SQLAlchemy ORM models.

Individual models should be imported explicitly:
    from app.models.conversation import Conversation

All models are imported here so Base.metadata knows every table
when create_tables() runs at startup.
"""

from app.models.conversation import Conversation
from app.models.message import Message

__all__ = [
    "Conversation",
    "Message",
]
