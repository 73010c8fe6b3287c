"""Core functionality for clock tracking and reporting."""

from time_manager.core.clock import ClockService
from time_manager.core.models import ClockEvent, Role, Team, User
from time_manager.core.reports import ReportService

__all__ = ["ClockEvent", "User", "Team", "Role", "ClockService", "ReportService"]
