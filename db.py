from __future__ import annotations
import csv
import io
import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from models import WorkoutSession, WorkoutType

logger = logging.getLogger(__name__)

ErrorHook = Callable[[str, Exception], None]


class KeyValueStore(Protocol):
    """Storage of serialized blobs by key."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "key_value": (
            """CREATE TABLE key_value (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, _columns) in self._TABLE_DEFINITIONS.items():
                cur = conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' AND name=?;",
                    (table,),
                )
                if cur.fetchone() is None:
                    conn.execute(sql)


class SQLiteStore(Database):
    """Key-value store kept in a single SQLite table."""

    def get(self, key: str) -> Optional[str]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT value FROM key_value WHERE key = ?;", (key,)
            ).fetchall()
        return rows[0][0] if rows else None

    def set(self, key: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO key_value (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                (key, value),
            )

    def delete(self, key: str) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM key_value WHERE key = ?;", (key,))

    def keys(self) -> List[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT key FROM key_value ORDER BY key;").fetchall()
        return [r[0] for r in rows]


class InMemoryStore:
    """Dict-backed store for tests and throwaway runs."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self.data)


class BaseRepository:
    """Load and save one JSON blob under ``KEY``.

    Read failures come back as ``default()``; write failures skip the write.
    Neither is raised. Both are logged and passed to ``on_error`` if given.
    """

    KEY = ""

    def __init__(self, store: KeyValueStore, on_error: ErrorHook | None = None) -> None:
        self.store = store
        self.on_error = on_error

    def _report(self, exc: Exception) -> None:
        logger.warning("persistence failure for %s: %s", self.KEY, exc)
        if self.on_error is not None:
            self.on_error(self.KEY, exc)

    def _read(self) -> Optional[str]:
        try:
            return self.store.get(self.KEY)
        except (sqlite3.Error, OSError) as e:
            self._report(e)
            return None

    def _write(self, payload: str) -> None:
        try:
            self.store.set(self.KEY, payload)
        except (sqlite3.Error, OSError) as e:
            self._report(e)


class SessionRepository(BaseRepository):
    """Persists the committed session list."""

    KEY = "savedWorkouts"
    _adapter = TypeAdapter(List[WorkoutSession])

    def load(self) -> List[WorkoutSession]:
        raw = self._read()
        if raw is None:
            return []
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            self._report(e)
            return []

    def save(self, sessions: Iterable[WorkoutSession]) -> None:
        try:
            payload = self._adapter.dump_json(list(sessions)).decode("utf-8")
        except (PydanticSerializationError, ValidationError, TypeError, ValueError) as e:
            self._report(e)
            return
        self._write(payload)

    def export_json(self, sessions: Iterable[WorkoutSession]) -> str:
        data = self._adapter.dump_python(list(sessions), mode="json")
        return json.dumps(data, indent=2)

    def export_csv(self, sessions: Iterable[WorkoutSession]) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["Workout", "Date", "Type", "Exercise", "Set", "Weight", "Reps"])
        for session in sessions:
            for ex in session.exercises:
                for idx, entry in enumerate(ex.sets, start=1):
                    writer.writerow(
                        [
                            str(session.id),
                            session.date.isoformat(),
                            session.type.value,
                            ex.name,
                            idx,
                            entry.weight,
                            entry.reps,
                        ]
                    )
        return output.getvalue()


class CustomExerciseRepository(BaseRepository):
    """Persists the custom exercise names per workout type."""

    KEY = "customExercisesByType"
    _adapter = TypeAdapter(Dict[WorkoutType, List[str]])

    def load(self) -> Dict[WorkoutType, List[str]]:
        raw = self._read()
        if raw is None:
            return {}
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            self._report(e)
            return {}

    def save(self, registry: Dict[WorkoutType, List[str]]) -> None:
        try:
            payload = self._adapter.dump_json(registry).decode("utf-8")
        except (PydanticSerializationError, ValidationError, TypeError, ValueError) as e:
            self._report(e)
            return
        self._write(payload)


def open_store(db_path: str | None) -> KeyValueStore:
    """Return an SQLite store at ``db_path`` or an in-memory one for ``None``/``:memory:``."""
    if db_path is None or db_path == ":memory:":
        return InMemoryStore()
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return SQLiteStore(db_path)
