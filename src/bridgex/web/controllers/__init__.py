"""HTTP controllers for web API endpoints.

Controllers read derived state and record user choices and form input.
Quote fetching and transaction submission happen elsewhere.
"""

from bridgex.web.controllers.bridge import router as bridge_router

__all__ = [
    "bridge_router",
]
