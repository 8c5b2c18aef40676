"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from food_analyzer.services.healthcheck import get_health_checker, HealthStatus

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/health/services")
async def services_health():
    """
    Health check of all components.

    Checks:
    - API responsiveness
    - Vision service configuration
    """
    checker = get_health_checker()
    report = await checker.run_all_checks()

    return report.to_dict()


@router.get("/health/ready")
async def readiness_check():
    """
    Kubernetes-style readiness check.

    Returns 200 unless a check is unhealthy. A missing OpenAI key only
    degrades the service; it can still answer initialize and tools/list.
    """
    checker = get_health_checker()
    report = await checker.run_all_checks()

    if report.status == HealthStatus.UNHEALTHY:
        return JSONResponse(status_code=503, content={"ready": False, "status": report.status.value})
    return {"ready": True, "status": report.status.value}


@router.get("/health/live")
async def liveness_check():
    """
    Kubernetes-style liveness check.

    Returns 200 if the process is alive.
    """
    return {"live": True, "timestamp": datetime.utcnow().isoformat()}
