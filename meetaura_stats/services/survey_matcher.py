"""
Joins visits with survey answers given shortly after them.
"""

import logging
from typing import Optional

import pandas as pd

from meetaura_stats.domain.entities.summary import VisitSummary
from meetaura_stats.domain.entities.survey import (
    SURVEY_ID_COLUMN, SURVEY_TIMESTAMP_COLUMN, SurveyTable
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_MS = 600_000

# epoch values at or above this are milliseconds (year 1973 in ms, year 5138 in s)
EPOCH_MS_THRESHOLD = 100_000_000_000


def survey_timestamp_ms(value: str, timezone: str = 'UTC') -> Optional[int]:
    """
    Epoch milliseconds of a survey timestamp cell, None when unparsable.

    Accepts epoch seconds or milliseconds given as digits, and any date string
    pandas can parse. Naive dates are read in ``timezone``.
    """
    if not value or not value.strip():
        return None
    value = value.strip()
    if value.isdigit():
        epoch = int(value)
        return epoch if epoch >= EPOCH_MS_THRESHOLD else epoch * 1000
    parsed = pd.to_datetime(value, errors='coerce')
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.tz_localize(timezone)
    return int(parsed.timestamp() * 1000)


class SurveyMatcher:
    """
    Finds the survey row answered after a visit.
    Rows are scanned in table order and the first one inside the window wins,
    even if a later row is closer in time.
    """

    def __init__(self, table: SurveyTable, window_ms: int = DEFAULT_WINDOW_MS, timezone: str = 'UTC'):
        self.table = table
        self.window_ms = window_ms
        self._entries = [
            (row[SURVEY_ID_COLUMN], survey_timestamp_ms(row[SURVEY_TIMESTAMP_COLUMN], timezone))
            for row in table.records
            if len(row) > SURVEY_TIMESTAMP_COLUMN
        ]

    def match(self, timestamp: int) -> str:
        visit_ms = timestamp * 1000
        for survey_id, survey_ms in self._entries:
            if survey_ms is None:
                continue
            if 0 < survey_ms - visit_ms <= self.window_ms:
                return survey_id
        return ''

    def annotate(self, summaries: list[VisitSummary]) -> list[VisitSummary]:
        annotated = [summary.with_survey(self.match(summary.timestamp)) for summary in summaries]
        matched = sum(1 for summary in annotated if summary.survey_id)
        logger.info(f'Matched {matched} of {len(annotated)} visits with a survey answer')
        return annotated


def match_survey(timestamp: int, table: SurveyTable, window_ms: int = DEFAULT_WINDOW_MS) -> str:
    return SurveyMatcher(table, window_ms).match(timestamp)
