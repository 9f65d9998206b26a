"""
Health check endpoint
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, Any]:
    """
    Basic liveness check. The service holds no session state, so there is
    nothing else to probe.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
