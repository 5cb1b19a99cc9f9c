import json
import os
import threading
import uuid
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .schemas import InterviewResult, ScheduledInterview, SessionConfig, UserProfile

logger = logging.getLogger('store')

INTERVIEW_SESSIONS = "interview_sessions"
INTERVIEW_RESULTS = "interview_results"
USER_PROFILES = "user_profiles"
SCHEDULED_INTERVIEWS = "scheduled_interviews"

TABLES = (INTERVIEW_SESSIONS, INTERVIEW_RESULTS, USER_PROFILES, SCHEDULED_INTERVIEWS)


class RowStore:
    """Minimal row store: one JSON file per table, rows are plain dicts.

    Rows are held in memory after the first read of a table and written
    through to disk on every change. One instance may be shared by several
    threads (Streamlit sessions); every read and write holds the store lock.
    """

    def __init__(self, data_dir: str = ".data", tables=TABLES):
        """
        Args:
            data_dir: Directory holding the table files
            tables: Table names accepted by this store
        """
        self.data_dir = Path(data_dir)
        self.tables = tuple(tables)
        self.memory_tables: Dict[str, List[Dict[str, Any]]] = {}
        self.lock = threading.RLock()
        os.makedirs(self.data_dir, exist_ok=True)

    def _table_path(self, table: str) -> Path:
        return self.data_dir / f"{table}.json"

    def _check_table(self, table: str):
        if table not in self.tables:
            raise ValueError(f"Unknown table '{table}'")

    def _load(self, table: str) -> List[Dict[str, Any]]:
        if table in self.memory_tables:
            return self.memory_tables[table]

        rows: List[Dict[str, Any]] = []
        path = self._table_path(table)
        if path.exists():
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if isinstance(loaded, list):
                    rows = loaded
                else:
                    logger.warning(f"Table file {path} does not hold a list, treating as empty")
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Table read error for {table}: {str(e)}")

        self.memory_tables[table] = rows
        return rows

    def _save(self, table: str):
        path = self._table_path(table)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self.memory_tables.get(table, []), f, indent=2)
        except (OSError, TypeError) as e:
            logger.error(f"Table write error for {table}: {str(e)}")

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row, assigning `id` and `created_at`. Returns the stored row."""
        self._check_table(table)
        stored = dict(row)
        stored['id'] = uuid.uuid4().hex
        stored.setdefault('created_at', datetime.now().isoformat())

        with self.lock:
            self._load(table).append(stored)
            self._save(table)
            logger.debug(f"Inserted row {stored['id']} into {table}")
            return dict(stored)

    def select(self, table: str, **filters) -> List[Dict[str, Any]]:
        """Rows whose fields equal every given filter, in insertion order."""
        self._check_table(table)
        with self.lock:
            return [
                dict(row) for row in self._load(table)
                if all(row.get(field) == value for field, value in filters.items())
            ]

    def update(self, table: str, row_id: str, **changes) -> Optional[Dict[str, Any]]:
        """Apply changes to one row. Returns the updated row, or None if it does not exist."""
        self._check_table(table)
        changes.pop('id', None)
        with self.lock:
            for row in self._load(table):
                if row.get('id') == row_id:
                    row.update(changes)
                    self._save(table)
                    return dict(row)
        logger.warning(f"No row {row_id} in {table} to update")
        return None


class InterviewRepository:
    """Typed access to the interview tables."""

    def __init__(self, store: RowStore):
        self.store = store

    def save_session_config(self, config: SessionConfig) -> str:
        row = self.store.insert(INTERVIEW_SESSIONS, config.model_dump(mode='json'))
        return row['id']

    def update_session_status(self, session_id: str, status: str) -> bool:
        return self.store.update(INTERVIEW_SESSIONS, session_id, status=status) is not None

    def save_result(self, result: InterviewResult) -> str:
        row = self.store.insert(INTERVIEW_RESULTS, result.model_dump(mode='json'))
        logger.info(f"Saved interview result {row['id']} for user {result.user_id}")
        return row['id']

    def get_history(self, user_id: str) -> List[Dict[str, Any]]:
        """A user's results, newest first. Ties keep the later insert first."""
        rows = self.store.select(INTERVIEW_RESULTS, user_id=user_id)
        ordered = sorted(
            enumerate(rows),
            key=lambda item: (item[1].get('created_at', ''), item[0]),
            reverse=True
        )
        return [row for _, row in ordered]

    def get_result(self, result_id: str) -> Optional[Dict[str, Any]]:
        rows = self.store.select(INTERVIEW_RESULTS, id=result_id)
        return rows[0] if rows else None

    def mark_result_emailed(self, result_id: str) -> bool:
        return self.store.update(INTERVIEW_RESULTS, result_id, email_sent=True) is not None

    def upsert_profile(self, profile: UserProfile) -> Dict[str, Any]:
        data = profile.model_dump(mode='json')
        with self.store.lock:
            existing = self.store.select(USER_PROFILES, user_id=profile.user_id)
            if existing:
                return self.store.update(USER_PROFILES, existing[0]['id'], **data)
            return self.store.insert(USER_PROFILES, data)

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        rows = self.store.select(USER_PROFILES, user_id=user_id)
        if not rows:
            return None
        return UserProfile(**{k: v for k, v in rows[0].items() if k in UserProfile.model_fields})

    def schedule_interview(self, interview: ScheduledInterview) -> str:
        row = self.store.insert(SCHEDULED_INTERVIEWS, interview.model_dump(mode='json'))
        return row['id']

    def get_scheduled_interview(self, interview_id: str) -> Optional[Dict[str, Any]]:
        rows = self.store.select(SCHEDULED_INTERVIEWS, id=interview_id)
        return rows[0] if rows else None

    def mark_reminder_sent(self, interview_id: str) -> bool:
        return self.store.update(SCHEDULED_INTERVIEWS, interview_id, reminder_sent=True) is not None


class PreferenceStore:
    """Local key/value preferences (API key, language) kept in a JSON file."""

    API_KEY = "api_key"
    LANGUAGE = "language"

    def __init__(self, path: str = ".data/preferences.json"):
        self.path = Path(path)
        self.values: Dict[str, str] = {}
        if self.path.exists():
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    self.values = {str(k): str(v) for k, v in loaded.items()}
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Preference read error: {str(e)}")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(key, default)

    def set(self, key: str, value: str):
        self.values[key] = value
        try:
            os.makedirs(self.path.parent, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self.values, f, indent=2)
        except OSError as e:
            logger.error(f"Preference write error: {str(e)}")
