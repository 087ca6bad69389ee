"""
Shared error reporting.
Every failed remote call lands in the error slot, register and cancel included.
"""

from booking_client.services.interfaces.error_reporting import ErrorReportingPolicy


class SharedErrorReporting(ErrorReportingPolicy):
    """
    Every failed remote call populates the error slot.

    Use when:
    - The UI wants a single place to show any failure
    """

    def publishes(self, operation: str) -> bool:
        return True
