"""
Infrastructure layer - external system integrations.
Keeps the booking state logic clean from transport details.
"""

from .http_client import get_http_client, HttpClient

__all__ = ['get_http_client', 'HttpClient']
