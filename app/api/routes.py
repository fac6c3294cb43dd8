"""
FastAPI routes for the photo ranking service.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_photo_analysis_service
from app.schemas import (
    AnalysisErrorDetail,
    AnalysisErrorResponse,
    PhotoAnalysisRequest,
    PhotoAnalysisResponse,
    ServiceConfig,
)
from app.services import AnalysisRequestError

router = APIRouter()
logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    AnalysisRequestError.INVALID_ARGUMENT: HTTPStatus.BAD_REQUEST,
    AnalysisRequestError.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post(
    "/photos/analyze",
    response_model=PhotoAnalysisResponse,
    responses={
        HTTPStatus.BAD_REQUEST: {"model": AnalysisErrorResponse},
        HTTPStatus.INTERNAL_SERVER_ERROR: {"model": AnalysisErrorResponse},
    },
)
async def analyze_photos(
    payload: PhotoAnalysisRequest,
    service: Annotated[Any, Depends(get_photo_analysis_service)],
) -> Any:
    """Score, annotate and rank a batch of photos."""
    try:
        return await service.analyze(payload)
    except AnalysisRequestError as exc:
        status_code = _ERROR_STATUS.get(exc.kind, HTTPStatus.INTERNAL_SERVER_ERROR)
        logger.warning("Photo analysis request failed (%s): %s", exc.kind, exc.message)
        body = AnalysisErrorResponse(
            error=AnalysisErrorDetail(kind=exc.kind, message=exc.message)
        )
        return JSONResponse(status_code=status_code, content=body.model_dump())


@router.get("/config", response_model=ServiceConfig, status_code=HTTPStatus.OK)
async def get_service_config(
    service: Annotated[Any, Depends(get_photo_analysis_service)],
) -> ServiceConfig:
    """Describe limits, supported criteria and enabled features."""
    return service.describe()


__all__ = ["router"]
