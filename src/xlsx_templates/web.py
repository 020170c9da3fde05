"""
xlsx-templates - Web API

FastAPI router serving bulk upload templates as downloads.

Usage:
    uvicorn xlsx_templates.web:create_app --factory --port 8000
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response

from .config import AppConfig, load_config
from .exceptions import InvalidArgumentError
from .generator import XLSX_MEDIA_TYPE, ExcelGenerator
from .logging_setup import configure_logging
from .registry import TemplateRegistry

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/excel", tags=["Excel templates"])


def template_filename(instrument_type: str, today: Optional[date] = None) -> str:
    """Download name, e.g. mortgage_bulk_upload_20250131.xlsx"""
    today = today or date.today()
    return f"{instrument_type.strip().lower()}_bulk_upload_{today:%Y%m%d}.xlsx"


def get_generator(request: Request) -> ExcelGenerator:
    """Dependency to get the generator bound to the app"""
    return request.app.state.generator


@router.get("/template")
def download_template(
    instrument_type: Optional[str] = Query(default=None, alias="instrumentType"),
    generator: ExcelGenerator = Depends(get_generator),
):
    """
    Download the bulk upload workbook for an instrument type.

    Returns the xlsx file as an attachment. Missing, blank or unknown
    instrument types are rejected with 400.
    """
    try:
        content = generator.generate_template(instrument_type or "")
    except InvalidArgumentError as e:
        logger.warning("Template request rejected", instrument_type=instrument_type, error=str(e))
        raise HTTPException(status_code=400, detail=str(e)) from e

    filename = template_filename(instrument_type)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Content-Length": str(len(content)),
        },
    )


@router.get("/templates")
def list_templates(generator: ExcelGenerator = Depends(get_generator)):
    """List configured instrument templates with their sheets and columns."""
    templates = generator.registry.list_templates()
    return {
        "templates": templates,
        "total": len(templates),
    }


def create_app(
    generator: Optional[ExcelGenerator] = None,
    config: Optional[AppConfig] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        generator: Preconfigured generator; built from config when omitted
        config: Application configuration; loaded from the environment when omitted
    """
    if generator is None:
        config = config or load_config()
        configure_logging(config.log)
        registry = TemplateRegistry.from_config(config)
        registry.initialize()
        generator = ExcelGenerator(registry, config.rendering)

    app = FastAPI(
        title="xlsx-templates",
        description="Bulk upload workbook templates",
        version="0.1.0",
    )
    app.state.generator = generator
    app.include_router(router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception",
                     path=request.url.path,
                     method=request.method,
                     error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "xlsx-templates",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "instrument_types": generator.registry.resolved().instrument_types,
        }

    return app
