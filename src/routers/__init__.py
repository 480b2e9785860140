"""Router modules for the StudyCards API."""

from . import ai, export, flashcards, ping, sessions, settings, youtube

__all__ = ["ai", "export", "flashcards", "ping", "sessions", "settings", "youtube"]
