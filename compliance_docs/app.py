import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from compliance_docs.application import build_wizard_service, configure_wizard_service
from compliance_docs.core.settings import load_settings
from compliance_docs.routes import wizard

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Compliance Document API", version="0.1.0")

    settings = load_settings()
    configure_wizard_service(build_wizard_service(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.include_router(wizard.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Compliance Document API",
                "docs": "/docs",
                "health": "/api/wizards/catalog",
            }
        )

    logger.info("templates served from %s", "storage bucket" if settings.hosted else settings.templates_root)
    return app


app = create_app()
