"""
Error reporting policy factory.
Configures which failures reach the shared error slot.
"""

from typing import Optional

from booking_client.services.interfaces.error_reporting import ErrorReportingPolicy
from booking_client.services.interfaces.refresh_only_reporting import RefreshOnlyReporting
from booking_client.services.interfaces.shared_reporting import SharedErrorReporting
from booking_client.core.config import Settings, get_settings
from booking_client.core.logging import get_logger

logger = get_logger(__name__)


def get_error_policy(settings: Optional[Settings] = None) -> ErrorReportingPolicy:
    """
    Get configured error reporting policy.

    Selected by the ERROR_REPORTING setting:
    - refresh_only (default): RefreshOnlyReporting
    - shared: SharedErrorReporting

    Unknown values fall back to the default.
    """
    settings = settings or get_settings()
    policy = settings.ERROR_REPORTING.lower()

    if policy == 'shared':
        return SharedErrorReporting()
    if policy != 'refresh_only':
        logger.warning("unknown_error_reporting_policy", policy=policy, fallback="refresh_only")
    return RefreshOnlyReporting()
