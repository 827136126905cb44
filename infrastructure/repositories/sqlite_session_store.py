import json
import logging
import sqlite3
from typing import Optional, Protocol

from use_cases.session_models import Session, UserProfile

log = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "auth_token"
REFRESH_TOKEN_KEY = "refresh_token"
USER_INFO_KEY = "user_info"

SESSION_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_INFO_KEY)

# Owner of the rows when a single client uses the database on its own.
LOCAL_BROWSER_ID = "local"


class SessionStore(Protocol):
    """Durable home of the current login, shared by the client and the gate."""

    def save(self, session: Session) -> None: ...

    def load(self) -> Optional[Session]: ...

    def clear(self) -> None: ...

    def is_authenticated(self) -> bool: ...

    def get_access_token(self) -> Optional[str]: ...

    def get_user(self) -> Optional[UserProfile]: ...


class SQLiteSessionStore:
    """
    Session rows live under a browser id, so every browser that shares the
    database file sees only its own login.
    """

    def __init__(self, db_path: str, browser_id: str = LOCAL_BROWSER_ID):
        self.db_path = db_path
        self.browser_id = browser_id

    def for_browser(self, browser_id: str) -> "SQLiteSessionStore":
        return SQLiteSessionStore(self.db_path, browser_id)

    def _conn(self):
        return sqlite3.connect(self.db_path)

    def _get_current_version(self, conn) -> int:
        version_row = conn.execute("SELECT version FROM schema_info").fetchone()
        return version_row[0] if version_row else 0

    def _migrate_v1(self, conn):
        """Baseline schema (v1)."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS session_kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)

    def _migrate_v2(self, conn):
        """Per-browser rows (v2)."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS browser_session_kv (
                browser_id TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                PRIMARY KEY (browser_id, key)
            )
        """)
        # Rows of the global v1 table belong to no browser.
        conn.execute("DROP TABLE IF EXISTS session_kv")

    def init_db(self):
        MIGRATIONS = [self._migrate_v1, self._migrate_v2]

        with self._conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_info (
                    version INTEGER NOT NULL
                )
            """)
            has_version_row = conn.execute("SELECT COUNT(*) FROM schema_info").fetchone()[0] > 0
            if not has_version_row:
                conn.execute("INSERT INTO schema_info (version) VALUES (0)")

            current_version = self._get_current_version(conn)
            for i in range(current_version, len(MIGRATIONS)):
                target_version = i + 1
                try:
                    MIGRATIONS[i](conn)
                    conn.execute("UPDATE schema_info SET version = ?", (target_version,))
                except sqlite3.Error as e:
                    # Leaving the `with` block on an exception rolls the whole init back.
                    raise RuntimeError(f"Session store migration to v{target_version} failed: {e}") from e

            conn.commit()

    def save(self, session: Session) -> None:
        """Write token, refresh token and profile in one transaction.

        Companions missing from `session` are deleted so nothing from an
        earlier login lingers beside the new access token.
        """
        values = {
            ACCESS_TOKEN_KEY: session.access_token,
            REFRESH_TOKEN_KEY: session.refresh_token,
            USER_INFO_KEY: json.dumps(session.user.to_dict()) if session.user else None,
        }
        with self._conn() as conn:
            for key, value in values.items():
                if value is None:
                    conn.execute(
                        "DELETE FROM browser_session_kv WHERE browser_id = ? AND key = ?",
                        (self.browser_id, key),
                    )
                else:
                    conn.execute("""
                        INSERT INTO browser_session_kv (browser_id, key, value) VALUES (?, ?, ?)
                        ON CONFLICT(browser_id, key) DO UPDATE SET value = excluded.value
                    """, (self.browser_id, key, value))
            conn.commit()

    def _read_all(self) -> dict:
        with self._conn() as conn:
            rows = conn.execute(
                "SELECT key, value FROM browser_session_kv WHERE browser_id = ? AND key IN (?, ?, ?)",
                (self.browser_id, *SESSION_KEYS),
            ).fetchall()
        return dict(rows)

    def load(self) -> Optional[Session]:
        values = self._read_all()
        token = values.get(ACCESS_TOKEN_KEY)
        if not token:
            return None
        return Session(
            access_token=token,
            refresh_token=values.get(REFRESH_TOKEN_KEY),
            user=self._decode_user(values.get(USER_INFO_KEY)),
        )

    def _decode_user(self, blob: Optional[str]) -> Optional[UserProfile]:
        if not blob:
            return None
        try:
            raw = json.loads(blob)
            if not isinstance(raw, dict):
                raise ValueError("user_info is not an object")
            return UserProfile.from_dict(raw)
        except (ValueError, TypeError) as e:
            log.warning(f"Stored user profile is unreadable, ignoring it: {e}")
            return None

    def clear(self) -> None:
        with self._conn() as conn:
            conn.execute(
                "DELETE FROM browser_session_kv WHERE browser_id = ? AND key IN (?, ?, ?)",
                (self.browser_id, *SESSION_KEYS),
            )
            conn.commit()

    def is_authenticated(self) -> bool:
        return self.load() is not None

    def get_access_token(self) -> Optional[str]:
        return self._read_all().get(ACCESS_TOKEN_KEY)

    def get_user(self) -> Optional[UserProfile]:
        return self._decode_user(self._read_all().get(USER_INFO_KEY))
