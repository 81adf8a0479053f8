"""
Clients for external services
"""

from .api import PiwikClient

__all__ = ['PiwikClient']
