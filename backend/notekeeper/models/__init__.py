# Models package init. Importing both models registers them on Base.metadata.
from notekeeper.models.note import Note
from notekeeper.models.user import User

__all__ = ["Note", "User"]
