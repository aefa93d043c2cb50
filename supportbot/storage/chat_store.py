"""SQLite storage for chat sessions and dashboard statistics."""

from __future__ import annotations

import datetime
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from supportbot.config import config
from supportbot.models import ChatSession, Message, Sender, utc_now_iso
from supportbot.storage.base import BaseSQLiteStore, Page

logger = config.get_logger(__name__)

RECENT_ACTIVITY_LIMIT = 5


@dataclass
class DashboardStats:
    """Usage counters shown on the admin dashboard."""

    total_chats: int = 0
    active_chats: int = 0
    total_faqs: int = 0
    total_documents: int = 0
    today_chats: int = 0
    recent_activity: list[dict[str, Any]] = field(default_factory=list)


class ChatStore(BaseSQLiteStore):
    """Chat session persistence."""

    def __init__(self, db_path: Path = Path("data/supportbot.db")) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        super().__init__(db_path)

    @staticmethod
    def _row_to_session(row: sqlite3.Row, messages: list[Message]) -> ChatSession:
        return ChatSession(
            session_id=row["session_id"],
            user_id=row["user_id"],
            messages=messages,
            active=bool(row["is_active"]),
            user_agent=row["user_agent"],
            ip_address=row["ip_address"],
            start_time=row["start_time"],
            end_time=row["end_time"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _load_messages(conn: sqlite3.Connection, session_id: str) -> list[Message]:
        rows = conn.execute(
            "SELECT content, sender, timestamp, provider, tokens_used FROM messages "
            "WHERE session_id = ? ORDER BY position",
            (session_id,),
        ).fetchall()
        return [
            Message(
                content=row["content"],
                sender=Sender(row["sender"]),
                timestamp=row["timestamp"],
                provider=row["provider"],
                tokens_used=row["tokens_used"],
            )
            for row in rows
        ]

    def get_session(self, session_id: str) -> ChatSession | None:
        """Load a session with all of its messages.

        Returns:
            ChatSession | None: The session, or None if it was never saved.
        """
        with self.connect() as conn:
            row = conn.execute(
                "SELECT * FROM chats WHERE session_id = ?", (session_id,)
            ).fetchone()
            if row is None:
                return None
            messages = self._load_messages(conn, session_id)
        return self._row_to_session(row, messages)

    def save_session(self, session: ChatSession) -> ChatSession:
        """Insert or replace a session and its message list.

        Returns:
            ChatSession: The saved session with timestamps updated.
        """
        now = utc_now_iso()
        session.created_at = session.created_at or now
        session.updated_at = now

        with self.connect() as conn:
            conn.execute(
                """
                INSERT INTO chats (
                    session_id, user_id, is_active, user_agent, ip_address,
                    start_time, end_time, total_messages, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(session_id) DO UPDATE SET
                    user_id = excluded.user_id,
                    is_active = excluded.is_active,
                    user_agent = excluded.user_agent,
                    ip_address = excluded.ip_address,
                    end_time = excluded.end_time,
                    total_messages = excluded.total_messages,
                    updated_at = excluded.updated_at
                """,
                (
                    session.session_id,
                    session.user_id,
                    int(session.active),
                    session.user_agent,
                    session.ip_address,
                    session.start_time,
                    session.end_time,
                    session.total_messages,
                    session.created_at,
                    session.updated_at,
                ),
            )
            conn.execute(
                "DELETE FROM messages WHERE session_id = ?", (session.session_id,)
            )
            conn.executemany(
                """
                INSERT INTO messages (
                    session_id, position, content, sender, timestamp, provider,
                    tokens_used
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        session.session_id,
                        position,
                        message.content,
                        message.sender.value,
                        message.timestamp,
                        message.provider,
                        message.tokens_used,
                    )
                    for position, message in enumerate(session.messages)
                ],
            )
        return session

    def list_sessions(
        self,
        page: int = 1,
        limit: int = 20,
        active: bool | None = None,
    ) -> Page[ChatSession]:
        """List sessions most recently updated first, without messages.

        Returns:
            Page[ChatSession]: Requested page and pagination totals.
        """
        where, params = "", []
        if active is not None:
            where, params = " WHERE is_active = ?", [int(active)]
        with self.connect() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM chats{where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM chats{where} ORDER BY updated_at DESC LIMIT ? OFFSET ?",
                [*params, limit, self._offset(page, limit)],
            ).fetchall()
        return Page(
            items=[self._row_to_session(row, []) for row in rows],
            page=page,
            limit=limit,
            total=total,
        )

    def deactivate_session(self, session_id: str) -> ChatSession | None:
        """Mark a session inactive and stamp its end time.

        Returns:
            ChatSession | None: The updated session, or None if it does not exist.
        """
        now = utc_now_iso()
        with self.connect() as conn:
            cursor = conn.execute(
                "UPDATE chats SET is_active = 0, end_time = ?, updated_at = ? "
                "WHERE session_id = ?",
                (now, now, session_id),
            )
        if cursor.rowcount == 0:
            return None
        logger.info("Deactivated chat session %s", session_id)
        return self.get_session(session_id)

    def dashboard_stats(self) -> DashboardStats:
        """Collect the counters shown on the admin dashboard.

        Returns:
            DashboardStats: Chat, FAQ and document counts plus recent sessions.
        """
        today = datetime.datetime.now(tz=datetime.UTC).date().isoformat()
        with self.connect() as conn:

            def count(sql: str, *params: Any) -> int:
                return conn.execute(sql, params).fetchone()[0]

            stats = DashboardStats(
                total_chats=count("SELECT COUNT(*) FROM chats"),
                active_chats=count("SELECT COUNT(*) FROM chats WHERE is_active = 1"),
                total_faqs=count("SELECT COUNT(*) FROM faqs WHERE is_active = 1"),
                total_documents=count(
                    "SELECT COUNT(*) FROM documents WHERE is_active = 1"
                ),
                today_chats=count(
                    "SELECT COUNT(*) FROM chats WHERE created_at >= ?", today
                ),
            )
            rows = conn.execute(
                "SELECT session_id, total_messages, updated_at FROM chats "
                "ORDER BY updated_at DESC LIMIT ?",
                (RECENT_ACTIVITY_LIMIT,),
            ).fetchall()
        stats.recent_activity = [dict(row) for row in rows]
        return stats
