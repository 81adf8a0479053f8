"""
Errors that abort a report run
"""


class ReportError(Exception):
    """Base class for failures that stop the report from being written."""

    stage = 'report'

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f'{self.stage} failed: {self.message}'


class FetchError(ReportError):
    """Request to the reporting API failed or returned an unusable body."""

    stage = 'fetch'


class SurveyLoadError(ReportError):
    """Survey file could not be read or parsed."""

    stage = 'survey'


class ConfigError(ReportError):
    """Environment or .env holds an invalid setting."""

    stage = 'config'
