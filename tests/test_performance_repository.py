from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from src.models.performance import AggregateRecord
from src.repositories.performance_repository import PerformanceRepository


class StubSupabaseClient:
    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None) -> None:
        self.rows = rows or []
        self.selects: List[Dict[str, Any]] = []
        self.upserts: List[Tuple[str, Dict[str, Any], str]] = []

    def select(self, table, select, filters=None, limit=None, order=None):
        self.selects.append({"table": table, "filters": filters, "limit": limit, "order": order})
        return self.rows

    def upsert(self, table, payload, on_conflict):
        self.upserts.append((table, payload, on_conflict))
        return [payload]


def test_get_filters_by_name() -> None:
    client = StubSupabaseClient(
        rows=[{"name": "سلمى", "calls_daily": 12, "last_update": "2026-01-06T09:00:00+00:00"}]
    )
    repository = PerformanceRepository(client=client)
    record = repository.get("سلمى")
    assert record is not None
    assert record.calls_daily == 12
    assert record.last_update == datetime(2026, 1, 6, 9, 0, tzinfo=timezone.utc)
    assert client.selects[0]["table"] == "call_center_performance"
    assert client.selects[0]["filters"] == [("name", "eq.سلمى")]


def test_get_returns_none_when_absent() -> None:
    repository = PerformanceRepository(client=StubSupabaseClient())
    assert repository.get("سحر") is None


def test_upsert_merges_on_name_and_notifies_subscribers() -> None:
    client = StubSupabaseClient()
    repository = PerformanceRepository(client=client)
    seen: List[AggregateRecord] = []
    unsubscribe = repository.subscribe(seen.append)

    record = AggregateRecord(
        name="بيان", calls_daily=5, last_update=datetime(2026, 1, 6, 9, 0, tzinfo=timezone.utc)
    )
    saved = repository.upsert("بيان", record)

    table, payload, on_conflict = client.upserts[0]
    assert table == "call_center_performance"
    assert on_conflict == "name"
    assert payload["name"] == "بيان"
    assert payload["last_update"] == "2026-01-06T09:00:00Z"
    assert saved.calls_daily == 5
    assert [item.name for item in seen] == ["بيان"]

    unsubscribe()
    repository.upsert("بيان", record)
    assert len(seen) == 1


def test_failing_subscriber_does_not_break_upsert() -> None:
    repository = PerformanceRepository(client=StubSupabaseClient())

    def broken(_: AggregateRecord) -> None:
        raise RuntimeError("listener down")

    repository.subscribe(broken)
    saved = repository.upsert("سحر", AggregateRecord(name="سحر"))
    assert saved.name == "سحر"


def test_list_all() -> None:
    client = StubSupabaseClient(rows=[{"name": "بيان"}, {"name": "سحر", "conv_rate": 0.3}])
    records = PerformanceRepository(client=client).list_all()
    assert [record.name for record in records] == ["بيان", "سحر"]
    assert client.selects[0]["order"] == "name.asc"
