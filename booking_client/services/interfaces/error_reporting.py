"""
Error reporting policy interface.
Decides which failed operations surface through the shared error slot.
"""

from abc import ABC, abstractmethod


class ErrorReportingPolicy(ABC):
    """
    Interface for error reporting policies.

    Implementations:
    - RefreshOnlyReporting: only refresh failures reach the error slot
    - SharedErrorReporting: every failed remote call reaches the error slot

    Whatever the policy, operations still return a BookingOutcome and
    failures are always logged.
    """

    @abstractmethod
    def publishes(self, operation: str) -> bool:
        """
        Check if a failure of this operation belongs in the error slot.

        Args:
            operation: refresh, register or cancel

        Returns:
            True if the manager should store the error
        """
        pass
