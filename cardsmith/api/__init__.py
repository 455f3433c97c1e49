from cardsmith.api.export import router as export_router
from cardsmith.api.health import router as health_router
from cardsmith.api.projects import router as projects_router
from cardsmith.api.recents import router as recents_router

__all__ = [
    "export_router",
    "health_router",
    "projects_router",
    "recents_router",
]
