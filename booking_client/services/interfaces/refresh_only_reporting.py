"""
Refresh-only error reporting - the default policy.
Register and cancel failures are rolled back and logged, never published.
"""

from booking_client.services.interfaces.error_reporting import ErrorReportingPolicy


class RefreshOnlyReporting(ErrorReportingPolicy):
    """
    Only refresh failures populate the error slot.

    Use when:
    - The UI shows one page-level error for loading the list
    - Per-action failures are conveyed by the reverted list itself
    """

    def publishes(self, operation: str) -> bool:
        return operation == "refresh"
