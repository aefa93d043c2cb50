"""Shared helpers for SQLite-backed stores."""

from __future__ import annotations

import json
import math
import sqlite3
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, TypeVar

from supportbot.config import config
from supportbot.models import normalize_tags

logger = config.get_logger(__name__)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a listing query."""

    items: list[T] = field(default_factory=list)
    page: int = 1
    limit: int = 20
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit > 0 else 0

    @property
    def has_next(self) -> bool:
        return (self.page - 1) * self.limit + len(self.items) < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1


class BaseSQLiteStore:
    """Common schema management and helpers for stores using SQLite."""

    def __init__(self, db_path: Path) -> None:
        """Initialize the store and ensure the schema exists."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(exist_ok=True, parents=True)
        self._create_tables()

    def connect(self) -> sqlite3.Connection:
        """Open a connection returning rows addressable by column name.

        Returns:
            sqlite3.Connection: New connection to the store database.
        """
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _create_tables(self) -> None:
        """Create knowledge-base and chat tables if they don't exist."""
        with sqlite3.connect(str(self.db_path)) as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS faqs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    question TEXT NOT NULL,
                    answer TEXT NOT NULL,
                    category TEXT,
                    tags TEXT NOT NULL DEFAULT '[]',
                    is_active INTEGER NOT NULL DEFAULT 1,
                    priority INTEGER NOT NULL DEFAULT 0 CHECK(
                        priority BETWEEN 0 AND 10
                    ),
                    view_count INTEGER NOT NULL DEFAULT 0,
                    helpful_count INTEGER NOT NULL DEFAULT 0,
                    created_by TEXT NOT NULL DEFAULT 'admin',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    original_name TEXT NOT NULL,
                    content TEXT NOT NULL,
                    type TEXT NOT NULL CHECK(
                        type IN ('pdf','txt','doc','docx','md')
                    ),
                    size INTEGER NOT NULL CHECK(size >= 0),
                    category TEXT,
                    tags TEXT NOT NULL DEFAULT '[]',
                    is_active INTEGER NOT NULL DEFAULT 1,
                    access_count INTEGER NOT NULL DEFAULT 0,
                    uploaded_by TEXT NOT NULL DEFAULT 'admin',
                    last_accessed TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS chats (
                    session_id TEXT PRIMARY KEY,
                    user_id TEXT,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    user_agent TEXT,
                    ip_address TEXT,
                    start_time TEXT NOT NULL,
                    end_time TEXT,
                    total_messages INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    content TEXT NOT NULL,
                    sender TEXT NOT NULL CHECK(sender IN ('user','ai')),
                    timestamp TEXT NOT NULL,
                    provider TEXT,
                    tokens_used INTEGER NOT NULL DEFAULT 0,
                    FOREIGN KEY (session_id) REFERENCES chats (session_id)
                )
            """)

            self._create_indexes(cursor)
            conn.commit()

    @staticmethod
    def _create_indexes(cursor: sqlite3.Cursor) -> None:
        """Ensure indexes exist for common filters."""
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_faqs_active_priority "
            "ON faqs(is_active, priority DESC, created_at DESC)"
        )
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_faqs_category ON faqs(category)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_documents_active ON documents(is_active)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_documents_type ON documents(type)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_messages_session "
            "ON messages(session_id, position)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_chats_updated ON chats(updated_at DESC)"
        )

    @staticmethod
    def _dump_tags(tags: Iterable[str] | None) -> str:
        return json.dumps(normalize_tags(tags))

    @staticmethod
    def _load_tags(raw: str | None) -> list[str]:
        if not raw:
            return []
        try:
            loaded = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed tags value: %s", raw)
            return []
        return normalize_tags(loaded)

    @staticmethod
    def _offset(page: int, limit: int) -> int:
        return max(page - 1, 0) * limit
