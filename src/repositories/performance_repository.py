from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, List, Optional

from src.core.config import get_settings
from src.core.supabase import SupabaseClient
from src.models.performance import AggregateRecord

logger = logging.getLogger(__name__)

RecordListener = Callable[[AggregateRecord], None]


class PerformanceRepository:
    def __init__(self, client: Optional[SupabaseClient] = None) -> None:
        self.client = client or SupabaseClient()
        self.table = get_settings().performance_table
        self._listeners: List[RecordListener] = []
        self._listeners_lock = Lock()

    def get(self, name: str) -> Optional[AggregateRecord]:
        rows = self.client.select(
            table=self.table,
            select="*",
            filters=[("name", f"eq.{name}")],
            limit=1,
        )
        if not rows:
            return None
        return AggregateRecord.model_validate(rows[0])

    def list_all(self) -> List[AggregateRecord]:
        rows = self.client.select(table=self.table, select="*", order="name.asc")
        return [AggregateRecord.model_validate(row) for row in rows]

    def upsert(self, name: str, record: AggregateRecord) -> AggregateRecord:
        payload = {**record.to_row(), "name": name}
        rows = self.client.upsert(self.table, payload, on_conflict="name")
        saved = AggregateRecord.model_validate(rows[0]) if rows else record
        self._notify(saved)
        return saved

    def subscribe(self, callback: RecordListener) -> Callable[[], None]:
        with self._listeners_lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, record: AggregateRecord) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(record)
            except Exception:
                logger.exception("Performance listener failed for %s", record.name)
