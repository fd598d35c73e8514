"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends

from qrbridge.api.dependencies import get_sessions
from qrbridge.config import get_settings
from qrbridge.services.session_service import ScanSessionManager


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, sessions: ScanSessionManager):
        self._sessions = sessions

    def check_sessions(self) -> dict:
        """Registration summary across sessions."""
        sessions = self._sessions.list()
        registered = sum(1 for s in sessions if s.scanner.registered)
        return {"active": len(sessions), "registered": registered}

    def get_health(self) -> dict:
        """Get full health status."""
        session_info = self.check_sessions()

        return {
            "status": "healthy",
            "components": {
                "api": "healthy",
                "scanner": "healthy",
            },
            "details": {
                "pixel_format": get_settings().pixel_format.value,
                "sessions": session_info,
            }
        }


@router.get("")
async def health_check(sessions: ScanSessionManager = Depends(get_sessions)):
    """
    Health check endpoint.

    Returns API status and scan session summary.
    """
    controller = HealthController(sessions)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
