# SQLAlchemy models package
from notekeeper.backend.models.base import Base
from notekeeper.backend.models.note import Note

__all__ = ["Base", "Note"]
