"""SQLite-based tool store backing the crawlers and the tools API."""

import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..core.config import settings
from ..core.exceptions import ToolConflictError
from ..core.logging import logger
from ..models.tool import LABEL_KINDS, ToolRecord


# Columns that may be written through update_tool
UPDATABLE_FIELDS = (
    "name",
    "slug",
    "website_url",
    "http_code",
    "http_chain",
    "is_active",
    "pricing_type",
    "pricing_details",
    "description",
    "detailed_description",
    "logo_url",
    "twitter_url",
    "instagram_url",
    "facebook_url",
    "linkedin_url",
    "github_url",
    "youtube_url",
    "app_store_url",
    "play_store_url",
    "has_affiliate_program",
    "affiliate_url",
)

BOOLEAN_FIELDS = ("is_active", "has_affiliate_program")


def _is_slug_conflict(error: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed: tools.slug" in str(error)


class ToolStore:
    """
    SQLite-based store for catalog tools.

    Tools live in ``tools``; their tags, features, categories and user
    types live in ``tool_labels`` as ``(tool_id, kind, value)`` rows.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Initialize the tool store."""
        self.db_path = db_path or settings.DATABASE_PATH
        self._ensure_db_directory()
        self._init_database()
        logger.info(f"ToolStore initialized with database at {self.db_path}")

    def _ensure_db_directory(self):
        """Ensure the database directory exists."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_database(self):
        """Initialize the database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS tools (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    slug TEXT NOT NULL UNIQUE,
                    website_url TEXT,
                    http_code INTEGER,
                    http_chain TEXT,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    pricing_type TEXT NOT NULL DEFAULT 'FREEMIUM',
                    pricing_details TEXT,
                    description TEXT NOT NULL DEFAULT '',
                    detailed_description TEXT,
                    logo_url TEXT,
                    twitter_url TEXT,
                    instagram_url TEXT,
                    facebook_url TEXT,
                    linkedin_url TEXT,
                    github_url TEXT,
                    youtube_url TEXT,
                    app_store_url TEXT,
                    play_store_url TEXT,
                    has_affiliate_program INTEGER NOT NULL DEFAULT 0,
                    affiliate_url TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS tool_labels (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    tool_id TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    value TEXT NOT NULL,
                    FOREIGN KEY (tool_id) REFERENCES tools(id) ON DELETE CASCADE,
                    UNIQUE(tool_id, kind, value)
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_tool_labels_tool_id ON tool_labels(tool_id)")

            conn.commit()
            logger.debug("Tool store schema initialized")

    def create_tool(
        self,
        name: str,
        slug: str,
        website_url: Optional[str] = None,
        description: str = "",
        pricing_type: str = "FREEMIUM",
        is_active: bool = True,
        labels: Optional[Dict[str, List[str]]] = None
    ) -> ToolRecord:
        """
        Create a new tool.

        Args:
            name: Display name
            slug: Unique URL slug
            website_url: Tool website
            description: Short description
            pricing_type: FREE, FREEMIUM or PAID
            is_active: Whether the tool is listed
            labels: Label values keyed by kind (tags, features, ...)

        Returns:
            ToolRecord: The created tool

        Raises:
            ToolConflictError: the slug is already taken
        """
        tool_id = str(uuid.uuid4())
        now = datetime.utcnow().isoformat()

        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO tools (id, name, slug, website_url, description, pricing_type,
                                       is_active, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    tool_id, name, slug, website_url, description, pricing_type,
                    int(is_active), now, now
                ))
                conn.commit()
        except sqlite3.IntegrityError as e:
            if not _is_slug_conflict(e):
                raise
            raise ToolConflictError(slug) from e

        for kind, values in (labels or {}).items():
            self.replace_labels(tool_id, kind, values)

        logger.info(f"Created tool: {tool_id} - {slug}")
        return self.get_tool(tool_id)

    def get_tool(self, tool_id: str) -> Optional[ToolRecord]:
        """Get a tool by ID."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM tools WHERE id = ?", (tool_id,)).fetchone()
            return self._row_to_tool(conn, row) if row else None

    def get_by_slug(self, slug: str) -> Optional[ToolRecord]:
        """Get a tool by slug."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM tools WHERE slug = ?", (slug,)).fetchone()
            return self._row_to_tool(conn, row) if row else None

    def find(self, tool_id: Optional[str] = None, slug: Optional[str] = None) -> Optional[ToolRecord]:
        """Get a tool by ID when given, by slug otherwise."""
        if tool_id:
            return self.get_tool(tool_id)
        if slug:
            return self.get_by_slug(slug)
        return None

    def list_by_ids(self, tool_ids: Iterable[str]) -> List[ToolRecord]:
        """Tools matching the given IDs; unknown IDs are skipped."""
        ids = list(dict.fromkeys(tool_ids))
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM tools WHERE id IN ({placeholders}) ORDER BY name",
                ids
            ).fetchall()
            return [self._row_to_tool(conn, row) for row in rows]

    def count_tools(self) -> int:
        """Number of tools in the store."""
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM tools").fetchone()[0]

    def update_tool(self, tool_id: str, **fields: Any) -> Optional[ToolRecord]:
        """
        Update columns of a tool.

        Args:
            tool_id: Tool ID
            **fields: Column values; only names in UPDATABLE_FIELDS are accepted

        Returns:
            The updated tool, or None when it does not exist

        Raises:
            ValueError: an unknown column was given
            ToolConflictError: the new slug is already taken
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown tool fields: {', '.join(sorted(unknown))}")

        if not fields:
            return self.get_tool(tool_id)

        values = {
            key: int(value) if key in BOOLEAN_FIELDS and value is not None else value
            for key, value in fields.items()
        }
        values["updated_at"] = datetime.utcnow().isoformat()
        assignments = ", ".join(f"{key} = ?" for key in values)

        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    f"UPDATE tools SET {assignments} WHERE id = ?",
                    [*values.values(), tool_id]
                )
                conn.commit()
                if cursor.rowcount == 0:
                    return None
        except sqlite3.IntegrityError as e:
            if not _is_slug_conflict(e):
                raise
            raise ToolConflictError(str(fields.get("slug"))) from e

        logger.debug(f"Updated tool {tool_id}: {', '.join(fields)}")
        return self.get_tool(tool_id)

    def update_by_key(
        self,
        tool_id: Optional[str] = None,
        slug: Optional[str] = None,
        **fields: Any
    ) -> Optional[ToolRecord]:
        """Update the tool found by ID or slug; logs and returns None when there is none."""
        tool = self.find(tool_id, slug)
        if tool is None:
            logger.warning(f"No tool found for id={tool_id!r} slug={slug!r}, nothing persisted")
            return None
        return self.update_tool(tool.id, **fields)

    def replace_labels(self, tool_id: str, kind: str, values: Iterable[str]):
        """Replace all labels of one kind: delete the old rows, insert the new ones."""
        if kind not in LABEL_KINDS:
            raise ValueError(f"Unknown label kind: {kind}")

        unique_values = [value for value in dict.fromkeys(values) if value]
        with self._get_connection() as conn:
            conn.execute("DELETE FROM tool_labels WHERE tool_id = ? AND kind = ?", (tool_id, kind))
            conn.executemany(
                "INSERT INTO tool_labels (tool_id, kind, value) VALUES (?, ?, ?)",
                [(tool_id, kind, value) for value in unique_values]
            )
            conn.commit()

    def delete_tool(self, tool_id: str) -> bool:
        """Delete a tool and its labels. Returns False when it did not exist."""
        with self._get_connection() as conn:
            conn.execute("DELETE FROM tool_labels WHERE tool_id = ?", (tool_id,))
            cursor = conn.execute("DELETE FROM tools WHERE id = ?", (tool_id,))
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted tool: {tool_id}")
        return deleted

    def _row_to_tool(self, conn: sqlite3.Connection, row: sqlite3.Row) -> ToolRecord:
        """Convert a database row and its labels to a ToolRecord."""
        data = dict(row)
        for key in BOOLEAN_FIELDS:
            data[key] = bool(data[key])

        labels: Dict[str, List[str]] = {kind: [] for kind in LABEL_KINDS}
        for label in conn.execute(
            "SELECT kind, value FROM tool_labels WHERE tool_id = ? ORDER BY id",
            (row["id"],)
        ):
            labels.setdefault(label["kind"], []).append(label["value"])

        return ToolRecord(**data, **labels)
