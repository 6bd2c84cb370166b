from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from .contracts import HealthReport
from .service import HealthService

_service: Optional[HealthService] = None


def set_health_service(svc: HealthService) -> None:
    global _service
    _service = svc


def get_health_service() -> HealthService:
    if _service is None:
        raise RuntimeError("HealthService is not configured; call set_health_service() first")
    return _service


def _respond(report: HealthReport) -> JSONResponse:
    code = status.HTTP_200_OK if report.healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content=report.model_dump())


router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health(svc: HealthService = Depends(get_health_service)):
    return _respond(svc.check())


@router.get("/liveness")
def liveness(svc: HealthService = Depends(get_health_service)):
    return svc.liveness()


@router.get("/readiness")
def readiness(svc: HealthService = Depends(get_health_service)):
    return _respond(svc.readiness())
