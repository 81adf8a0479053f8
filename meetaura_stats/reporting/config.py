"""
Configuration for the visit report
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError

from meetaura_stats.errors import ConfigError


class ReportConfig(BaseSettings):
    """Configuration for the Piwik reporting run"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    piwik_uri: str = Field(
        default="http://localhost/index.php",
        description="Piwik API entry point"
    )
    piwik_token: str = Field(
        default="anonymous",
        description="token_auth sent with every request"
    )
    piwik_id_site: int = Field(
        default=1,
        description="Piwik site id"
    )
    piwik_period: str = Field(
        default="day",
        description="Reporting period (day, week, month, year, range)"
    )
    piwik_date: str = Field(
        default="today",
        description="Reporting date or range"
    )

    output_path: str = Field(
        default="meetaura-stats.xlsx",
        description="Where the XLSX report is written"
    )

    survey_window_ms: int = Field(
        default=600_000,
        ge=0,
        description="How long after a visit a survey answer still belongs to it"
    )
    survey_delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="Field delimiter of the survey file"
    )
    survey_encoding: str = Field(
        default="utf-8-sig",
        description="Text encoding of the survey file"
    )
    survey_timezone: str = Field(
        default="UTC",
        description="Timezone of naive survey timestamps"
    )

    max_concurrent_requests: int = Field(
        default=10,
        ge=1,
        description="Upper bound of visitor profiles fetched at once"
    )
    request_timeout: Optional[float] = Field(
        default=30.0,
        description="HTTP request timeout in seconds"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )


def load_config(**overrides) -> ReportConfig:
    """Load configuration from environment variables and .env file"""
    try:
        return ReportConfig(**overrides)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
