"""
Health Check Endpoint

Reports server status, uptime and the configured CT lookup source.
"""

import logging
import time
from fastapi import APIRouter

from siteguard.core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()

_start_time = time.time()


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring and load balancers."""
    uptime_seconds = int(time.time() - _start_time)

    return {
        "status": "healthy",
        "uptime_seconds": uptime_seconds,
        "certificate_lookup": {
            "source": settings.CT_LOG_URL,
            "timeout_seconds": settings.CT_LOOKUP_TIMEOUT,
        },
    }
