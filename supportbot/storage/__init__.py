"""SQLite-backed knowledge-base and chat storage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from supportbot.config import config

from .base import Page
from .chat_store import ChatStore, DashboardStats
from .knowledge_store import KnowledgeStore

if TYPE_CHECKING:
    from pathlib import Path


def get_stores(db_path: Path | None = None) -> tuple[KnowledgeStore, ChatStore]:
    """Return knowledge and chat stores sharing one database file."""  # noqa: DOC201
    if db_path is None:
        db_path = config.DATABASE_PATH
    return KnowledgeStore(db_path), ChatStore(db_path)


__all__ = ["ChatStore", "DashboardStats", "KnowledgeStore", "Page", "get_stores"]
