"""SQLite storage for users, objectives and their collaborators."""

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional

from .objectives.ledger import CommentLedger, Ledger
from .objectives.models import Objective

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'user',
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS objectives (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT,
    category TEXT NOT NULL,
    tracking_type TEXT NOT NULL,
    cadence TEXT NOT NULL,
    target REAL,
    status TEXT NOT NULL DEFAULT 'active',
    start_date TEXT NOT NULL,
    duration INTEGER NOT NULL DEFAULT 90,
    progress TEXT NOT NULL DEFAULT '{}',
    comments TEXT NOT NULL DEFAULT '{}',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS resources (
    id TEXT PRIMARY KEY,
    objective_id TEXT NOT NULL REFERENCES objectives(id) ON DELETE CASCADE,
    title TEXT NOT NULL,
    type TEXT NOT NULL,
    url TEXT NOT NULL,
    description TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS conversations (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    objective_id TEXT REFERENCES objectives(id) ON DELETE CASCADE,
    messages TEXT NOT NULL DEFAULT '[]',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS finances (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    amount REAL NOT NULL,
    currency TEXT NOT NULL DEFAULT 'FCFA',
    date TEXT NOT NULL,
    category TEXT,
    description TEXT,
    recurring INTEGER NOT NULL DEFAULT 0,
    frequency TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_settings (
    user_id TEXT PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
    default_currency TEXT NOT NULL DEFAULT 'FCFA',
    theme TEXT NOT NULL DEFAULT 'light',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS quran_verses (
    surah INTEGER NOT NULL,
    verse INTEGER NOT NULL,
    arabic_text TEXT NOT NULL,
    french_text TEXT NOT NULL,
    PRIMARY KEY (surah, verse)
);

CREATE TABLE IF NOT EXISTS articles (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    category TEXT NOT NULL,
    image TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

FINANCE_FIELDS = (
    "name",
    "type",
    "amount",
    "currency",
    "date",
    "category",
    "description",
    "recurring",
    "frequency",
)
RESOURCE_FIELDS = ("title", "type", "url", "description")
ARTICLE_FIELDS = ("title", "content", "category", "image")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def _finance_from_row(row: sqlite3.Row) -> dict[str, Any]:
    entry = dict(row)
    entry["recurring"] = bool(entry["recurring"])
    return entry


def _conversation_from_row(row: sqlite3.Row) -> dict[str, Any]:
    conversation = dict(row)
    conversation["messages"] = json.loads(conversation["messages"] or "[]")
    return conversation


class Database:
    """SQLite database handle shared by the request handlers and the sweep."""

    def __init__(self, db_path: str = "data/goaltrack.db"):
        """Initialize database."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection with foreign keys enforced; commits on success."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_db(self):
        """Create database tables if they don't exist."""
        with self._connect() as conn:
            conn.executescript(SCHEMA)
        logger.info(f"Database initialized at {self.db_path}")

    # Users

    def create_user(
        self, name: str, email: str, password_hash: str, role: str = "user"
    ) -> dict[str, Any]:
        user = {
            "id": _new_id(),
            "name": name,
            "email": email,
            "role": role,
            "created_at": _now(),
        }
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO users (id, name, email, password, role, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user["id"], name, email, password_hash, role, user["created_at"]),
            )
        logger.info(f"Created user: {email}")
        return user

    def get_user(self, user_id: str) -> Optional[dict[str, Any]]:
        """Get user by id, without the password hash."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, email, role, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        return dict(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[dict[str, Any]]:
        """Get user by email, including the password hash."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?", (email,)
            ).fetchone()
        return dict(row) if row else None

    def set_user_role(self, user_id: str, role: str):
        with self._connect() as conn:
            conn.execute("UPDATE users SET role = ? WHERE id = ?", (role, user_id))

    # Objectives

    def create_objective(self, objective: Objective) -> Objective:
        now = datetime.now(timezone.utc)
        objective.id = objective.id or _new_id()
        objective.created_at = objective.updated_at = now
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO objectives (
                    id, user_id, name, description, category, tracking_type,
                    cadence, target, status, start_date, duration, progress,
                    comments, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    objective.id,
                    objective.user_id,
                    objective.name,
                    objective.description,
                    objective.category.value,
                    objective.tracking_type.value,
                    objective.cadence.value,
                    objective.target,
                    objective.status.value,
                    objective.start_date.isoformat(),
                    objective.duration,
                    json.dumps(objective.progress.to_json()),
                    json.dumps(objective.comments.to_json()),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
        logger.info(f"Created objective {objective.id} ({objective.name})")
        return objective

    def get_objective(self, objective_id: str) -> Optional[Objective]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM objectives WHERE id = ?", (objective_id,)
            ).fetchone()
        return Objective.from_row(row) if row else None

    def list_objectives(
        self,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        tracking_type: Optional[str] = None,
        category: Optional[str] = None,
        skip_invalid: bool = False,
    ) -> list[Objective]:
        """
        List objectives, newest first.

        Args:
            user_id: Restrict to one owner (all owners when omitted)
            status: Restrict to one status
            tracking_type: Restrict to one tracking type
            category: Restrict to one category
            skip_invalid: Log and leave out rows whose stored data fails
                validation instead of raising

        Returns:
            Objectives with validated ledgers
        """
        clauses = []
        params = []
        for column, value in (
            ("user_id", user_id),
            ("status", status),
            ("tracking_type", tracking_type),
            ("category", category),
        ):
            if value is not None:
                clauses.append(f"{column} = ?")
                params.append(value)

        query = "SELECT * FROM objectives"
        if clauses:
            query += f" WHERE {' AND '.join(clauses)}"
        query += " ORDER BY created_at DESC"

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()

        objectives = []
        for row in rows:
            try:
                objectives.append(Objective.from_row(row))
            except ValueError as e:
                if not skip_invalid:
                    raise
                logger.error(f"Skipping objective {row['id']} with invalid stored data: {e}")
        return objectives

    def update_objective(self, objective: Objective) -> Objective:
        """Write every mutable column of an objective."""
        objective.updated_at = datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE objectives SET
                    name = ?, description = ?, category = ?, tracking_type = ?,
                    cadence = ?, target = ?, status = ?, start_date = ?,
                    duration = ?, progress = ?, comments = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    objective.name,
                    objective.description,
                    objective.category.value,
                    objective.tracking_type.value,
                    objective.cadence.value,
                    objective.target,
                    objective.status.value,
                    objective.start_date.isoformat(),
                    objective.duration,
                    json.dumps(objective.progress.to_json()),
                    json.dumps(objective.comments.to_json()),
                    objective.updated_at.isoformat(),
                    objective.id,
                ),
            )
        return objective

    def save_progress(self, objective_id: str, progress: Ledger):
        """Replace the whole progress ledger of one objective."""
        with self._connect() as conn:
            conn.execute(
                "UPDATE objectives SET progress = ?, updated_at = ? WHERE id = ?",
                (json.dumps(progress.to_json()), _now(), objective_id),
            )

    def save_comments(self, objective_id: str, comments: CommentLedger):
        with self._connect() as conn:
            conn.execute(
                "UPDATE objectives SET comments = ?, updated_at = ? WHERE id = ?",
                (json.dumps(comments.to_json()), _now(), objective_id),
            )

    def set_objective_status(self, objective_id: str, status: str):
        with self._connect() as conn:
            conn.execute(
                "UPDATE objectives SET status = ?, updated_at = ? WHERE id = ?",
                (status, _now(), objective_id),
            )

    def delete_objective(self, objective_id: str):
        """Delete an objective; resources and conversations cascade."""
        with self._connect() as conn:
            conn.execute("DELETE FROM objectives WHERE id = ?", (objective_id,))
        logger.info(f"Deleted objective {objective_id}")

    # Resources

    def create_resource(self, objective_id: str, data: dict[str, Any]) -> dict[str, Any]:
        now = _now()
        resource = {field: data.get(field) for field in RESOURCE_FIELDS}
        resource.update(
            id=_new_id(), objective_id=objective_id, created_at=now, updated_at=now
        )
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO resources (
                    id, objective_id, title, type, url, description,
                    created_at, updated_at
                )
                VALUES (:id, :objective_id, :title, :type, :url, :description,
                        :created_at, :updated_at)
                """,
                resource,
            )
        return resource

    def get_resource(self, resource_id: str) -> Optional[dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM resources WHERE id = ?", (resource_id,)
            ).fetchone()
        return dict(row) if row else None

    def list_resources(self, objective_id: str) -> list[dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM resources WHERE objective_id = ? ORDER BY created_at DESC",
                (objective_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    def update_resource(self, resource_id: str, data: dict[str, Any]) -> dict[str, Any]:
        values = {field: data.get(field) for field in RESOURCE_FIELDS}
        values.update(id=resource_id, updated_at=_now())
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE resources SET
                    title = :title, type = :type, url = :url,
                    description = :description, updated_at = :updated_at
                WHERE id = :id
                """,
                values,
            )
        return self.get_resource(resource_id)

    def delete_resource(self, resource_id: str):
        with self._connect() as conn:
            conn.execute("DELETE FROM resources WHERE id = ?", (resource_id,))

    # Conversations

    def create_conversation(
        self,
        user_id: str,
        objective_id: Optional[str] = None,
        messages: Optional[list[dict[str, str]]] = None,
    ) -> dict[str, Any]:
        now = _now()
        conversation = {
            "id": _new_id(),
            "user_id": user_id,
            "objective_id": objective_id,
            "messages": messages or [],
            "created_at": now,
            "updated_at": now,
        }
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO conversations (
                    id, user_id, objective_id, messages, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    conversation["id"],
                    user_id,
                    objective_id,
                    json.dumps(conversation["messages"]),
                    now,
                    now,
                ),
            )
        return conversation

    def get_conversation(self, conversation_id: str) -> Optional[dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM conversations WHERE id = ?", (conversation_id,)
            ).fetchone()
        return _conversation_from_row(row) if row else None

    def list_conversations(self, user_id: str) -> list[dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM conversations WHERE user_id = ? ORDER BY updated_at DESC",
                (user_id,),
            ).fetchall()
        return [_conversation_from_row(row) for row in rows]

    def save_messages(
        self, conversation_id: str, messages: list[dict[str, str]]
    ) -> dict[str, Any]:
        with self._connect() as conn:
            conn.execute(
                "UPDATE conversations SET messages = ?, updated_at = ? WHERE id = ?",
                (json.dumps(messages), _now(), conversation_id),
            )
        return self.get_conversation(conversation_id)

    def delete_conversation(self, conversation_id: str):
        with self._connect() as conn:
            conn.execute("DELETE FROM conversations WHERE id = ?", (conversation_id,))

    # Finances

    def create_finance(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        now = _now()
        entry = {field: data.get(field) for field in FINANCE_FIELDS}
        entry.update(id=_new_id(), user_id=user_id, created_at=now, updated_at=now)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO finances (
                    id, user_id, name, type, amount, currency, date, category,
                    description, recurring, frequency, created_at, updated_at
                )
                VALUES (:id, :user_id, :name, :type, :amount, :currency, :date,
                        :category, :description, :recurring, :frequency,
                        :created_at, :updated_at)
                """,
                entry,
            )
        return self.get_finance(entry["id"])

    def get_finance(self, finance_id: str) -> Optional[dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM finances WHERE id = ?", (finance_id,)
            ).fetchone()
        return _finance_from_row(row) if row else None

    def list_finances(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        entry_type: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """
        List finance entries, newest date first.

        ``start`` is inclusive and ``end`` exclusive when given.
        """
        query = "SELECT * FROM finances WHERE user_id = ?"
        params: list[Any] = [user_id]
        if start is not None:
            query += " AND date >= ?"
            params.append(start.isoformat())
        if end is not None:
            query += " AND date < ?"
            params.append(end.isoformat())
        if entry_type is not None:
            query += " AND type = ?"
            params.append(entry_type)
        query += " ORDER BY date DESC, created_at DESC"

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_finance_from_row(row) for row in rows]

    def update_finance(self, finance_id: str, data: dict[str, Any]) -> dict[str, Any]:
        values = {field: data.get(field) for field in FINANCE_FIELDS}
        values.update(id=finance_id, updated_at=_now())
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE finances SET
                    name = :name, type = :type, amount = :amount,
                    currency = :currency, date = :date, category = :category,
                    description = :description, recurring = :recurring,
                    frequency = :frequency, updated_at = :updated_at
                WHERE id = :id
                """,
                values,
            )
        return self.get_finance(finance_id)

    def delete_finance(self, finance_id: str):
        with self._connect() as conn:
            conn.execute("DELETE FROM finances WHERE id = ?", (finance_id,))

    # Settings

    def get_settings(self, user_id: str) -> dict[str, Any]:
        """Get user settings, creating the defaults on first read."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM user_settings WHERE user_id = ?", (user_id,)
            ).fetchone()
            if row is None:
                now = _now()
                conn.execute(
                    """
                    INSERT INTO user_settings (user_id, created_at, updated_at)
                    VALUES (?, ?, ?)
                    """,
                    (user_id, now, now),
                )
                row = conn.execute(
                    "SELECT * FROM user_settings WHERE user_id = ?", (user_id,)
                ).fetchone()
                logger.info(f"Created default settings for user {user_id}")
        return dict(row)

    def update_settings(
        self, user_id: str, default_currency: str, theme: str
    ) -> dict[str, Any]:
        self.get_settings(user_id)
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE user_settings
                SET default_currency = ?, theme = ?, updated_at = ?
                WHERE user_id = ?
                """,
                (default_currency, theme, _now(), user_id),
            )
        return self.get_settings(user_id)

    # Quran verses

    def add_verses(self, verses: list[dict[str, Any]]) -> int:
        """Insert or replace verses; returns the number written."""
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT OR REPLACE INTO quran_verses (surah, verse, arabic_text, french_text)
                VALUES (:surah, :verse, :arabic_text, :french_text)
                """,
                verses,
            )
        logger.info(f"Stored {len(verses)} verses")
        return len(verses)

    def list_verses(self, surah: int) -> list[dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM quran_verses WHERE surah = ? ORDER BY verse",
                (surah,),
            ).fetchall()
        return [dict(row) for row in rows]

    def get_verse(self, surah: int, verse: int) -> Optional[dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM quran_verses WHERE surah = ? AND verse = ?",
                (surah, verse),
            ).fetchone()
        return dict(row) if row else None

    def search_verses(self, text: str) -> list[dict[str, Any]]:
        """Case-insensitive substring search over Arabic and French text."""
        pattern = f"%{text}%"
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM quran_verses
                WHERE arabic_text LIKE ? OR french_text LIKE ?
                ORDER BY surah, verse
                """,
                (pattern, pattern),
            ).fetchall()
        return [dict(row) for row in rows]

    # Culture articles

    def create_article(self, data: dict[str, Any]) -> dict[str, Any]:
        now = _now()
        article = {field: data.get(field) for field in ARTICLE_FIELDS}
        article.update(id=_new_id(), created_at=now, updated_at=now)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO articles (id, title, content, category, image,
                                      created_at, updated_at)
                VALUES (:id, :title, :content, :category, :image,
                        :created_at, :updated_at)
                """,
                article,
            )
        return article

    def get_article(self, article_id: str) -> Optional[dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM articles WHERE id = ?", (article_id,)
            ).fetchone()
        return dict(row) if row else None

    def list_articles(self, category: Optional[str] = None) -> list[dict[str, Any]]:
        query = "SELECT * FROM articles"
        params: list[Any] = []
        if category:
            query += " WHERE category = ?"
            params.append(category)
        query += " ORDER BY created_at DESC"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [dict(row) for row in rows]

    def update_article(self, article_id: str, data: dict[str, Any]) -> dict[str, Any]:
        values = {field: data.get(field) for field in ARTICLE_FIELDS}
        values.update(id=article_id, updated_at=_now())
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE articles SET
                    title = :title, content = :content, category = :category,
                    image = :image, updated_at = :updated_at
                WHERE id = :id
                """,
                values,
            )
        return self.get_article(article_id)

    def delete_article(self, article_id: str):
        with self._connect() as conn:
            conn.execute("DELETE FROM articles WHERE id = ?", (article_id,))
