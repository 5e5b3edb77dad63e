from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_performance_service
from src.main import create_app
from src.models.performance import AggregateRecord
from src.services.performance_service import PerformanceService


class InMemoryPerformanceStore:
    def __init__(self, records: Optional[List[AggregateRecord]] = None) -> None:
        self.records: Dict[str, AggregateRecord] = {record.name: record for record in records or []}
        self.upserts: List[AggregateRecord] = []

    def get(self, name: str) -> Optional[AggregateRecord]:
        return self.records.get(name)

    def upsert(self, name: str, record: AggregateRecord) -> AggregateRecord:
        self.records[name] = record
        self.upserts.append(record)
        return record

    def list_all(self) -> List[AggregateRecord]:
        return list(self.records.values())


class RecordingArchiveClient:
    def __init__(self, delivered: bool = True) -> None:
        self.delivered = delivered
        self.payloads: List[Dict[str, Any]] = []

    def send(self, payload: Dict[str, Any]) -> bool:
        self.payloads.append(payload)
        return self.delivered


def make_settings(**overrides: Any) -> SimpleNamespace:
    values = {
        "employee_names": "بيان,سلمى,سحر",
        "business_timezone": "UTC",
        "default_daily_leads": 50,
        "block_duplicate_daily_submission": True,
        "threshold_green": 1.0,
        "threshold_yellow": 0.7,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def first_phrase(phrases):
    return phrases[0]


@pytest.fixture()
def store() -> InMemoryPerformanceStore:
    return InMemoryPerformanceStore()


@pytest.fixture()
def archive() -> RecordingArchiveClient:
    return RecordingArchiveClient()


@pytest.fixture()
def service(store, archive) -> PerformanceService:
    performance_service = PerformanceService(
        repository=store, archive_client=archive, choose=first_phrase
    )
    performance_service.settings = make_settings()
    return performance_service


@pytest.fixture()
def client(service) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_performance_service] = lambda: service
    return TestClient(app)
