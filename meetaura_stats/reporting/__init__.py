"""
Piwik visit report

- clients/ - Piwik reporting API client
- models.py - Pydantic models of the API responses
- orchestrator.py - Main workflow coordinator (import it from its module)
- config.py - Configuration management
"""

from .clients import PiwikClient
from .config import ReportConfig, load_config

__all__ = [
    'PiwikClient',
    'ReportConfig',
    'load_config',
]
