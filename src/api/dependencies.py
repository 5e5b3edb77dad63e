from __future__ import annotations

from functools import lru_cache

from src.core.archive_webhook import ArchiveWebhookClient
from src.repositories.performance_repository import PerformanceRepository
from src.services.performance_service import PerformanceService


@lru_cache
def get_performance_repository() -> PerformanceRepository:
    return PerformanceRepository()


@lru_cache
def get_archive_webhook_client() -> ArchiveWebhookClient:
    return ArchiveWebhookClient()


def get_performance_service() -> PerformanceService:
    return PerformanceService(
        repository=get_performance_repository(),
        archive_client=get_archive_webhook_client(),
    )
