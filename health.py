"""
Health check and monitoring endpoints
"""

import logging
from datetime import datetime, timedelta
import requests
from config import Config
from utils.performance import get_performance_summary

logger = logging.getLogger(__name__)

# Warning index older than this is reported as stale
MAX_WARNINGS_AGE = timedelta(hours=6)


def check_ipma_warnings_api():
    """Check if the IPMA warnings feed is accessible"""
    try:
        response = requests.get(Config.WARNINGS_URL, timeout=5)
        if response.status_code == 200:
            return True, "IPMA warnings feed accessible"
        else:
            return False, f"IPMA warnings feed returned status {response.status_code}"
    except requests.RequestException as e:
        logger.error(f"IPMA warnings feed check failed: {e}")
        return False, f"IPMA warnings feed error: {str(e)}"


def check_warning_store(monitor):
    """Check that warnings have been loaded recently"""
    last_updated = monitor.store.last_updated
    if last_updated is None:
        return False, "Warning data has not been loaded"

    age = datetime.now() - last_updated
    if age > MAX_WARNINGS_AGE:
        return False, f"Warning data is stale ({int(age.total_seconds())}s old)"

    return True, f"{len(monitor.store)} warnings across {len(monitor.store.area_ids())} areas"


def get_health_status(monitor):
    """
    Get overall health status of the application

    Returns:
        dict: Health status information
    """
    checks = {
        "ipma_warnings_api": check_ipma_warnings_api(),
        "warning_store": check_warning_store(monitor),
    }

    all_healthy = all(status for status, _ in checks.values())

    return {
        "status": "healthy" if all_healthy else "unhealthy",
        "checks": {
            name: {"status": "pass" if status else "fail", "message": message}
            for name, (status, message) in checks.items()
        },
        "performance": get_performance_summary(),
    }
