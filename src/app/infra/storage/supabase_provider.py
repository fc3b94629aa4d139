from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client

from src.app.domain.errors import StorageBackendError
from src.app.infra.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "recipe_box_kv"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_supabase_client(url: Optional[str], key: Optional[str]) -> Client:
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


class SupabaseKeyValueStore(KeyValueStore):
    """
    Key/value rows in a Supabase table with columns
    ``key text primary key, value text, updated_at timestamptz``.
    """

    def __init__(self, client: Client, table_name: str = DEFAULT_TABLE_NAME):
        self._client = client
        self.table_name = table_name
        logger.info("SupabaseKeyValueStore initialized (table=%s)", table_name)

    def _read(self, key: str) -> Optional[str]:
        try:
            response = (
                self._client.table(self.table_name)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as exc:
            raise StorageBackendError(key, str(exc)) from exc
        rows = response.data or []
        if not rows:
            return None
        value = rows[0].get("value")
        return value if isinstance(value, str) else None

    def _write(self, key: str, value: str) -> None:
        try:
            (
                self._client.table(self.table_name)
                .upsert({"key": key, "value": value, "updated_at": _now_iso()}, on_conflict="key")
                .execute()
            )
        except Exception as exc:
            raise StorageBackendError(key, str(exc)) from exc

    async def get_item(self, key: str) -> Optional[str]:
        return await run_in_threadpool(self._read, key)

    async def set_item(self, key: str, value: str) -> None:
        await run_in_threadpool(self._write, key, value)
