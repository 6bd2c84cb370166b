from .config import HealthSettings
from .contracts import HealthReport, IndicatorResult
from .service import HealthService
from .routes import router as health_router, set_health_service, get_health_service

__all__ = [
    "HealthSettings",
    "HealthReport",
    "IndicatorResult",
    "HealthService",
    "health_router",
    "set_health_service",
    "get_health_service",
]
