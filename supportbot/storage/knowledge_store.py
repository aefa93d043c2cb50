"""SQLite storage for FAQs and documents."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

from supportbot.config import config
from supportbot.models import FAQ, Document, utc_now_iso
from supportbot.storage.base import BaseSQLiteStore, Page

logger = config.get_logger(__name__)

FAQ_UPDATABLE_FIELDS = {"question", "answer", "category", "tags", "active", "priority"}
DOCUMENT_UPDATABLE_FIELDS = {"name", "content", "category", "tags", "active"}
DOCUMENT_LIST_COLUMNS = (
    "id, name, original_name, '' AS content, type, size, category, tags, "
    "is_active, access_count, uploaded_by, last_accessed, created_at"
)


def _filters(
    clauses: dict[str, Any],
    search: str | None,
    search_columns: tuple[str, ...],
) -> tuple[str, list[Any]]:
    """Build a WHERE clause from equality filters and a text search.

    Returns:
        Tuple of (where_sql, params); where_sql is empty without filters.
    """
    conditions: list[str] = []
    params: list[Any] = []
    for column, value in clauses.items():
        if value is None:
            continue
        conditions.append(f"{column} = ?")
        params.append(int(value) if isinstance(value, bool) else value)
    if search:
        pattern = f"%{search.lower()}%"
        conditions.append(
            "(" + " OR ".join(f"LOWER({col}) LIKE ?" for col in search_columns) + ")"
        )
        params.extend([pattern] * len(search_columns))
    if not conditions:
        return "", params
    return " WHERE " + " AND ".join(conditions), params


class KnowledgeStore(BaseSQLiteStore):
    """FAQ and document persistence for the admin surface and the chat pipeline."""

    def __init__(self, db_path: Path = Path("data/supportbot.db")) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        super().__init__(db_path)

    # FAQs

    def _row_to_faq(self, row: sqlite3.Row) -> FAQ:
        return FAQ(
            id=row["id"],
            question=row["question"],
            answer=row["answer"],
            category=row["category"],
            tags=self._load_tags(row["tags"]),
            active=bool(row["is_active"]),
            priority=row["priority"],
            view_count=row["view_count"],
            helpful_count=row["helpful_count"],
            created_by=row["created_by"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def add_faq(self, faq: FAQ) -> FAQ:
        """Persist a new FAQ.

        Returns:
            FAQ: The stored FAQ with id and timestamps set.
        """
        now = utc_now_iso()
        with self.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO faqs (
                    question, answer, category, tags, is_active, priority,
                    view_count, helpful_count, created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    faq.question,
                    faq.answer,
                    faq.category,
                    self._dump_tags(faq.tags),
                    int(faq.active),
                    faq.priority,
                    faq.view_count,
                    faq.helpful_count,
                    faq.created_by,
                    now,
                    now,
                ),
            )
            faq.id = cursor.lastrowid
        faq.created_at = faq.updated_at = now
        logger.info("Created FAQ %s: %s", faq.id, faq.question)
        return faq

    def get_faq(self, faq_id: int) -> FAQ | None:
        with self.connect() as conn:
            row = conn.execute("SELECT * FROM faqs WHERE id = ?", (faq_id,)).fetchone()
        return self._row_to_faq(row) if row else None

    def update_faq(self, faq_id: int, **fields: Any) -> FAQ | None:
        """Update selected FAQ fields, validating the result.

        Returns:
            FAQ | None: The updated FAQ, or None if it does not exist.

        Raises:
            ValueError: If an unknown field is given or the result is invalid.
        """
        unknown = set(fields) - FAQ_UPDATABLE_FIELDS
        if unknown:
            msg = f"Cannot update FAQ fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        current = self.get_faq(faq_id)
        if current is None:
            return None

        values = {
            "question": current.question,
            "answer": current.answer,
            "category": current.category,
            "tags": current.tags,
            "active": current.active,
            "priority": current.priority,
        } | fields
        updated = FAQ(**values)

        now = utc_now_iso()
        with self.connect() as conn:
            conn.execute(
                """
                UPDATE faqs SET question = ?, answer = ?, category = ?, tags = ?,
                    is_active = ?, priority = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    updated.question,
                    updated.answer,
                    updated.category,
                    self._dump_tags(updated.tags),
                    int(updated.active),
                    updated.priority,
                    now,
                    faq_id,
                ),
            )
        return self.get_faq(faq_id)

    def delete_faq(self, faq_id: int) -> bool:
        with self.connect() as conn:
            cursor = conn.execute("DELETE FROM faqs WHERE id = ?", (faq_id,))
        return cursor.rowcount > 0

    def list_faqs(  # noqa: PLR0913
        self,
        category: str | None = None,
        search: str | None = None,
        active: bool | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page[FAQ]:
        """List FAQs by priority then recency, with optional filters.

        Returns:
            Page[FAQ]: Requested page and pagination totals.
        """
        where, params = _filters(
            {"category": category, "is_active": active},
            search,
            ("question", "answer", "category", "tags"),
        )
        with self.connect() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM faqs{where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM faqs{where} "
                "ORDER BY priority DESC, created_at DESC, id DESC LIMIT ? OFFSET ?",
                [*params, limit, self._offset(page, limit)],
            ).fetchall()
        return Page(
            items=[self._row_to_faq(row) for row in rows],
            page=page,
            limit=limit,
            total=total,
        )

    def count_faqs(self, active: bool | None = None) -> int:
        where, params = _filters({"is_active": active}, None, ())
        with self.connect() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM faqs{where}", params).fetchone()[0]

    def list_active_faqs(self, limit: int = 20) -> list[FAQ]:
        """Active FAQs ordered by priority then recency, capped at ``limit``.

        Returns:
            list[FAQ]: Candidate FAQs for the chat pipeline.
        """
        with self.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM faqs WHERE is_active = 1 "
                "ORDER BY priority DESC, created_at DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_faq(row) for row in rows]

    # Documents

    def _row_to_document(self, row: sqlite3.Row) -> Document:
        return Document(
            id=row["id"],
            name=row["name"],
            original_name=row["original_name"],
            content=row["content"],
            type=row["type"],
            size=row["size"],
            category=row["category"],
            tags=self._load_tags(row["tags"]),
            active=bool(row["is_active"]),
            access_count=row["access_count"],
            uploaded_by=row["uploaded_by"],
            last_accessed=row["last_accessed"],
            created_at=row["created_at"],
        )

    def add_document(self, document: Document) -> Document:
        """Persist a new document.

        Returns:
            Document: The stored document with id and timestamps set.
        """
        now = utc_now_iso()
        with self.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO documents (
                    name, original_name, content, type, size, category, tags,
                    is_active, access_count, uploaded_by, last_accessed,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    document.name,
                    document.original_name,
                    document.content,
                    document.type.value,
                    document.size,
                    document.category,
                    self._dump_tags(document.tags),
                    int(document.active),
                    document.access_count,
                    document.uploaded_by,
                    now,
                    now,
                    now,
                ),
            )
            document.id = cursor.lastrowid
        document.created_at = document.last_accessed = now
        logger.info("Created document %s: %s", document.id, document.name)
        return document

    def get_document(self, doc_id: int, *, track_access: bool = True) -> Document | None:
        """Fetch a document with its content.

        Args:
            doc_id: Document id.
            track_access: Increment the access counter and stamp last access.

        Returns:
            Document | None: The document, or None if it does not exist.
        """
        with self.connect() as conn:
            if track_access:
                conn.execute(
                    "UPDATE documents SET access_count = access_count + 1, "
                    "last_accessed = ? WHERE id = ?",
                    (utc_now_iso(), doc_id),
                )
            row = conn.execute(
                "SELECT * FROM documents WHERE id = ?", (doc_id,)
            ).fetchone()
        return self._row_to_document(row) if row else None

    def update_document(self, doc_id: int, **fields: Any) -> Document | None:
        """Update selected document fields.

        Returns:
            Document | None: The updated document, or None if it does not exist.

        Raises:
            ValueError: If an unknown field is given or the result is invalid.
        """
        unknown = set(fields) - DOCUMENT_UPDATABLE_FIELDS
        if unknown:
            msg = f"Cannot update document fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        current = self.get_document(doc_id, track_access=False)
        if current is None:
            return None

        content = fields.get("content", current.content)
        updated = Document(
            name=fields.get("name", current.name),
            content=content,
            type=current.type,
            size=None if "content" in fields else current.size,
            category=fields.get("category", current.category),
            tags=fields.get("tags", current.tags),
            active=fields.get("active", current.active),
        )

        with self.connect() as conn:
            conn.execute(
                """
                UPDATE documents SET name = ?, content = ?, size = ?, category = ?,
                    tags = ?, is_active = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    updated.name,
                    updated.content,
                    updated.size,
                    updated.category,
                    self._dump_tags(updated.tags),
                    int(updated.active),
                    utc_now_iso(),
                    doc_id,
                ),
            )
        return self.get_document(doc_id, track_access=False)

    def delete_document(self, doc_id: int) -> bool:
        with self.connect() as conn:
            cursor = conn.execute("DELETE FROM documents WHERE id = ?", (doc_id,))
        return cursor.rowcount > 0

    def list_documents(  # noqa: PLR0913
        self,
        category: str | None = None,
        doc_type: str | None = None,
        search: str | None = None,
        active: bool | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[Document]:
        """List documents newest first, without their content.

        Returns:
            Page[Document]: Requested page and pagination totals.
        """
        where, params = _filters(
            {"category": category, "type": doc_type, "is_active": active},
            search,
            ("name", "content", "category", "tags"),
        )
        with self.connect() as conn:
            total = conn.execute(
                f"SELECT COUNT(*) FROM documents{where}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"SELECT {DOCUMENT_LIST_COLUMNS} FROM documents{where} "
                "ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                [*params, limit, self._offset(page, limit)],
            ).fetchall()
        return Page(
            items=[self._row_to_document(row) for row in rows],
            page=page,
            limit=limit,
            total=total,
        )

    def count_documents(self, active: bool | None = None) -> int:
        where, params = _filters({"is_active": active}, None, ())
        with self.connect() as conn:
            return conn.execute(
                f"SELECT COUNT(*) FROM documents{where}", params
            ).fetchone()[0]

    def list_active_documents(self, limit: int = 10) -> list[Document]:
        """Active documents with only the fields the chat pipeline needs.

        Returns:
            list[Document]: Candidate documents, newest first.
        """
        with self.connect() as conn:
            rows = conn.execute(
                "SELECT id, name, content, type, category FROM documents "
                "WHERE is_active = 1 ORDER BY created_at DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [
            Document(
                id=row["id"],
                name=row["name"],
                content=row["content"],
                type=row["type"],
                category=row["category"],
            )
            for row in rows
        ]
