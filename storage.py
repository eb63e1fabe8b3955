"""Key/value backends that hold serialized cart snapshots.

Each backend stores whole strings under a key, so a reader always sees either
the previous snapshot or the new one, never a mix.
"""
from __future__ import annotations

import json
import logging
import os
import threading

logger = logging.getLogger(__name__)

# Roughly what browsers grant one origin.
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class StorageError(Exception):
    pass


class StorageQuotaExceeded(StorageError):
    pass


class MemoryStorage:
    """Origin-wide store shared by every tab served from this process."""

    name = "memory"

    def __init__(self, quota_bytes: int | None = DEFAULT_QUOTA_BYTES):
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            if self.quota_bytes is not None:
                used = sum(len(k) + len(v) for k, v in self._data.items() if k != key)
                if used + len(key) + len(value) > self.quota_bytes:
                    raise StorageQuotaExceeded(f"Setting '{key}' exceeds the {self.quota_bytes} byte quota")
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class FileStorage:
    """JSON file of key -> string, rewritten whole on every change."""

    name = "file"

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read_all(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        tmp = f"{self.path}.tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        with self._lock:
            v = self._read_all().get(key)
        return v if isinstance(v, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if key in data:
                del data[key]
                self._write_all(data)


class SupabaseStorage:
    """Snapshots kept in a `cart_snapshots` table, one row per (profile, key)."""

    name = "supabase"
    TABLE = "cart_snapshots"

    def __init__(self, client, profile_id: str = "default"):
        self.client = client
        self.profile_id = profile_id

    def get(self, key: str) -> str | None:
        rows = (
            self.client.table(self.TABLE)
            .select("payload")
            .eq("profile_id", self.profile_id)
            .eq("key", key)
            .limit(1)
            .execute()
            .data
        )
        return rows[0].get("payload") if rows else None

    def set(self, key: str, value: str) -> None:
        try:
            self.client.table(self.TABLE).upsert(
                {"profile_id": self.profile_id, "key": key, "payload": value},
                on_conflict="profile_id,key",
            ).execute()
        except Exception as e:
            raise StorageError(f"Supabase write failed for '{key}': {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.client.table(self.TABLE).delete().eq("profile_id", self.profile_id).eq("key", key).execute()
        except Exception as e:
            raise StorageError(f"Supabase delete failed for '{key}': {e}") from e
