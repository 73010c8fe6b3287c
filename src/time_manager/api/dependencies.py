"""Dependency injection for FastAPI endpoints.

The application factory builds one storage manager and one instance of each
service; these functions hand them to endpoints from ``app.state``.
"""

from fastapi import Request  # type: ignore[import-untyped]

from time_manager.core.clock import ClockService
from time_manager.core.reports import ReportService
from time_manager.core.storage import StorageManager


def get_storage(request: Request) -> StorageManager:
    """Get the shared storage manager."""
    storage: StorageManager = request.app.state.storage
    return storage


def get_clock_service(request: Request) -> ClockService:
    """Get the shared clock service."""
    service: ClockService = request.app.state.clock_service
    return service


def get_report_service(request: Request) -> ReportService:
    """Get the shared report service."""
    service: ReportService = request.app.state.report_service
    return service
