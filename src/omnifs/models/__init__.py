"""SQLModel table models."""

from omnifs.models.entries import Entry, EntryBase

__all__ = ["Entry", "EntryBase"]
