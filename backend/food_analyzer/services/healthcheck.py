"""
Health check system.

Checks:
- API responsiveness
- Vision service configuration (OpenAI base URL usable, credential present)
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

import httpx

from food_analyzer import __version__
from food_analyzer.config import get_settings

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health check status levels."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single health check."""
    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0
    details: dict = field(default_factory=dict)


@dataclass
class HealthReport:
    """Complete health report for the server."""
    status: HealthStatus
    checks: list[CheckResult]
    timestamp: datetime = field(default_factory=datetime.utcnow)
    version: str = __version__

    @property
    def healthy_count(self) -> int:
        return sum(1 for c in self.checks if c.status == HealthStatus.HEALTHY)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp.isoformat(),
            "summary": f"{self.healthy_count}/{len(self.checks)} checks passing",
            "checks": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": round(c.latency_ms, 2),
                    "details": c.details,
                }
                for c in self.checks
            ],
        }


class HealthChecker:
    """Runs health checks against the server's components."""

    async def check_api(self) -> CheckResult:
        """API check - if this runs, the API is up."""
        return CheckResult(name="api", status=HealthStatus.HEALTHY, message="API responding")

    async def check_vision(self) -> CheckResult:
        """Vision service configuration. No outbound call is made."""
        settings = get_settings()
        details = {"model": settings.vision_model, "base_url": settings.openai_base_url}

        try:
            base_url = httpx.URL(settings.openai_base_url)
        except (httpx.InvalidURL, TypeError) as e:
            base_url = None
            logger.warning("Invalid OPENAI_BASE_URL: %s", e)

        if base_url is None or base_url.scheme not in ("http", "https") or not base_url.host:
            return CheckResult(
                name="vision",
                status=HealthStatus.UNHEALTHY,
                message="OPENAI_BASE_URL is not an http(s) URL - analysis calls cannot be sent",
                details=details,
            )

        if not settings.vision_configured:
            return CheckResult(
                name="vision",
                status=HealthStatus.DEGRADED,
                message="OPENAI_API_KEY not set - analysis calls will be rejected",
                details=details,
            )

        return CheckResult(
            name="vision",
            status=HealthStatus.HEALTHY,
            message="OpenAI credential configured",
            details=details,
        )

    async def run_all_checks(self) -> HealthReport:
        """Run all health checks and return report."""
        checks = list(await asyncio.gather(self.check_api(), self.check_vision()))

        if any(c.status == HealthStatus.UNHEALTHY for c in checks):
            status = HealthStatus.UNHEALTHY
        elif any(c.status == HealthStatus.DEGRADED for c in checks):
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.HEALTHY

        return HealthReport(status=status, checks=checks)


_health_checker: HealthChecker | None = None


def get_health_checker() -> HealthChecker:
    """Get or create health checker singleton."""
    global _health_checker
    if _health_checker is None:
        _health_checker = HealthChecker()
    return _health_checker
