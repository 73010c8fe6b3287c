"""REST API for Time Manager.

This module provides a FastAPI-based REST API for clocking in and out,
listing clock events, managing users and teams, and reading hours reports.

Key features:
- Clock toggle and clock history per user
- Worked-hours reports with daily averages
- JWT access and refresh tokens
- Role-based access (employee / manager)
- CORS support
- OpenAPI documentation

Usage:
    # Start server
    time-manager serve

    # Access API docs
    http://localhost:3000/docs
"""

__all__ = ["create_app", "run_server"]

from time_manager.api.server import create_app, run_server  # noqa: F401
