"""
Report Orchestrator - coordinates fetching, classification and the XLSX writer
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from meetaura_stats.domain.entities.summary import SummaryAccumulator
from meetaura_stats.reporting.clients.api import PiwikClient
from meetaura_stats.reporting.config import ReportConfig
from meetaura_stats.services.report_writer import write_report
from meetaura_stats.services.survey_loader import load_survey
from meetaura_stats.services.survey_matcher import SurveyMatcher
from meetaura_stats.services.visit_classifier import classify_visitors
from meetaura_stats.services.visit_fetcher import VisitorFetcher

logger = logging.getLogger(__name__)


class ReportOrchestrator:
    """
    Runs one report:
    1. Fetches visitors and loads the survey file concurrently
    2. Classifies every visit
    3. Joins visits with survey answers
    4. Writes the XLSX report
    """

    def __init__(
        self,
        config: ReportConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            config: Report configuration
            transport: Optional httpx transport for the Piwik client
        """
        self.config = config
        self.client = PiwikClient(
            base_url=config.piwik_uri,
            token=config.piwik_token,
            id_site=config.piwik_id_site,
            period=config.piwik_period,
            date=config.piwik_date,
            timeout=config.request_timeout,
            transport=transport
        )
        self.fetcher = VisitorFetcher(self.client, max_concurrency=config.max_concurrent_requests)
        self.accumulator = SummaryAccumulator()

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def close(self):
        await self.client.close()

    async def run(self, survey_path: Optional[str] = None, output_path: Optional[str] = None) -> Path:
        """
        Produce the report.

        Args:
            survey_path: Optional survey file to join with the visits
            output_path: Overrides the configured output path

        Returns:
            Path of the written report

        Raises:
            ReportError: If fetching or survey loading fails; nothing is written then
        """
        self.accumulator = SummaryAccumulator()

        fetching = asyncio.ensure_future(self.fetcher.fetch_visitors())
        loading = asyncio.ensure_future(load_survey(
            survey_path,
            delimiter=self.config.survey_delimiter,
            encoding=self.config.survey_encoding
        ))
        try:
            visitors, survey = await asyncio.gather(fetching, loading)
        except BaseException:
            fetching.cancel()
            loading.cancel()
            await asyncio.gather(fetching, loading, return_exceptions=True)
            raise

        logger.info('Processing...')
        self.accumulator.extend(classify_visitors(visitors))

        matcher = SurveyMatcher(
            survey,
            window_ms=self.config.survey_window_ms,
            timezone=self.config.survey_timezone
        )
        summaries = matcher.annotate(self.accumulator.summaries)

        return write_report(summaries, survey, output_path or self.config.output_path)
