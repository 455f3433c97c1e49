from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardsmith.api import (
    export_router,
    health_router,
    projects_router,
    recents_router,
)
from cardsmith.config import settings

app = FastAPI(
    title=settings.app_name,
    version=pkg_version("cardsmith"),
    debug=settings.debug,
)

app.include_router(export_router)
app.include_router(health_router)
app.include_router(projects_router)
app.include_router(recents_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # The desktop shell serves the studio from a file:// origin
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
