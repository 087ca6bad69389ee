"""
Service interfaces for dependency inversion.
Allows swapping policies without changing the booking state logic.
"""

from .error_reporting import ErrorReportingPolicy
from .refresh_only_reporting import RefreshOnlyReporting
from .shared_reporting import SharedErrorReporting

__all__ = ['ErrorReportingPolicy', 'RefreshOnlyReporting', 'SharedErrorReporting']
