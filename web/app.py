"""
FastAPI application for the claim report engine.

Serves generated reports as downloads: one PDF per request, or a zip bundle
of everything a supplement needs.

Production deployment configuration via environment variables.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from bundle import EmptyBundleError, assemble_claim_bundle
from reporting import (
    ReportGenerationError,
    ReportType,
    UnknownReportTypeError,
    get_composer,
    parse_report_type,
    record_from_dict,
)
from reporting.parsing import parse_supplement, parse_weather
from utils.config import Config
from utils.formatting import safe_filename

logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

VERSION = "0.1.0"


# =============================================================================
# API Request Models
# =============================================================================


class ReportRequest(BaseModel):
    """Request body for single report generation."""
    record: Dict[str, Any]
    filename: Optional[str] = None


class BundleRequest(BaseModel):
    """Request body for claim bundle generation."""
    supplement: Dict[str, Any]
    weather: Optional[Dict[str, Any]] = None
    adjuster_estimate: Optional[str] = None
    carrier_response: Optional[str] = None
    photos: List[str] = []


def attachment_headers(filename: str) -> Dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def _download_name(requested: Optional[str], default: str, extension: str) -> str:
    if not requested:
        return default
    stem = requested[: -len(extension)] if requested.lower().endswith(extension) else requested
    return f"{safe_filename(stem)}{extension}"


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()

    app = FastAPI(
        title="Claim Report Engine",
        description="Supplement, justification, weather and policy analysis PDFs",
        version=VERSION,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=config.debug and not IS_PRODUCTION,
    )

    # Healthcheck endpoints: synchronous, no IO.
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.get("/api/health")
    def api_health():
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": "production" if IS_PRODUCTION else "development",
            "report_types": [report_type.value for report_type in ReportType],
        }

    @app.post("/api/reports/{report_type}")
    def generate_report_endpoint(report_type: str, request_data: ReportRequest):
        """
        Generate one report and return it as a PDF download.

        Returns:
            - 200 application/pdf with an attachment Content-Disposition
            - 404 for an unknown report type
            - 422 when the record cannot be parsed
            - 500 with an error body when generation fails
        """
        try:
            kind = parse_report_type(report_type)
        except UnknownReportTypeError:
            raise HTTPException(status_code=404, detail=f"Unknown report type: {report_type}")

        try:
            record = record_from_dict(kind, request_data.record)
        except (TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=f"Invalid {kind.value} record: {e}")

        composer = get_composer(kind, config)
        try:
            content = composer.generate_to_buffer(record)
        except ReportGenerationError as e:
            logger.error("Report generation failed: %s", e)
            return JSONResponse(
                status_code=500,
                content={"success": False, "error": "Failed to generate PDF", "detail": e.reason},
            )

        filename = _download_name(request_data.filename, composer.filename(record), ".pdf")
        return Response(content=content, media_type="application/pdf", headers=attachment_headers(filename))

    @app.post("/api/bundles")
    def generate_bundle_endpoint(request_data: BundleRequest):
        """
        Generate the claim bundle zip.

        Documents or attachments that fail are left out; the response is a
        500 only when nothing at all could be produced.
        """
        try:
            supplement = parse_supplement(request_data.supplement)
            weather = parse_weather(request_data.weather) if request_data.weather else None
        except (TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=f"Invalid bundle request: {e}")

        try:
            result = assemble_claim_bundle(
                supplement,
                weather=weather,
                adjuster_estimate=request_data.adjuster_estimate,
                carrier_response=request_data.carrier_response,
                photos=request_data.photos,
                config=config,
            )
        except EmptyBundleError as e:
            logger.error("Bundle generation failed: %s", e)
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Failed to generate bundle",
                    "skipped": [failure.name for failure in e.skipped],
                },
            )

        headers = attachment_headers(result.filename)
        if result.skipped:
            headers["X-Bundle-Skipped"] = ",".join(failure.name for failure in result.skipped)
        return Response(content=result.content, media_type="application/zip", headers=headers)

    return app


# Create app instance for uvicorn
app = create_app()
