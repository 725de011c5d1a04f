from fastapi import FastAPI

from docapproval import __version__
from docapproval.api.error_handlers import register_error_handlers
from docapproval.api.routers import approvals, health
from docapproval.common.logger import setup_from_settings
from docapproval.core.config import get_settings

settings = get_settings()
setup_from_settings(settings)

app = FastAPI(
    title=settings.app_name,
    description="Document approval decision engine",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(approvals.router, prefix="/api")
