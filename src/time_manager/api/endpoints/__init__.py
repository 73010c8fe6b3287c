"""API endpoints.

This package contains all API endpoint routers organized by resource type.
Each module defines a FastAPI router that is included in the main application.

Available routers:
- system: Health check
- auth: Registration, login and token refresh
- users: User management
- teams: Team management
- clocks: Clock toggle and clock history
- reports: Worked-hours reports
"""

__all__ = ["system", "auth", "users", "teams", "clocks", "reports"]

from time_manager.api.endpoints import (  # noqa: F401
    auth,
    clocks,
    reports,
    system,
    teams,
    users,
)
