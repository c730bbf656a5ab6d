from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backoffice import __version__
from backoffice.common.logger import setup_logger
from backoffice.core.config import get_settings
from backoffice.api.routers import health, me, roles, users

settings = get_settings()

setup_logger(
    "backoffice",
    log_dir=settings.log_dir if settings.log_to_file else None,
    level=settings.log_level,
)

app = FastAPI(
    title=settings.app_name,
    description="Back office roles, permissions and access control",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(roles.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(me.router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
