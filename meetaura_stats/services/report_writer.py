"""
XLSX report generation.
One sheet with a row per visit, plus the raw survey table when one was loaded.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from meetaura_stats.domain.entities.summary import VisitSummary
from meetaura_stats.domain.entities.survey import SurveyTable

logger = logging.getLogger(__name__)

VISITS_SHEET = 'DETALLE VISITAS'
SURVEY_SHEET = 'ENCUESTAS'

REPORT_COLUMNS = [
    'USER_ID', 'FECHA', 'HORA', 'DURACIÓN', 'LOGIN', '#ACCIONES', 'RATING',
    'SALIDA', 'SMS', 'CAMBIO CANAL', 'VER PRINCIPIO', 'TV INFO',
    'RECOMENDACIÓN', 'BÚSQUEDA', 'WIFI', 'ENCUESTA'
]


def format_date(timestamp: int) -> str:
    """ISO-8601 UTC with milliseconds, e.g. 2017-05-04T10:15:00.000Z"""
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f'{moment.microsecond // 1000:03d}Z'


def format_duration(seconds: float) -> str:
    minutes, rest = divmod(int(round(seconds or 0)), 60)
    return f'{minutes:02d}:{rest:02d}'


def summary_row(summary: VisitSummary) -> list:
    return [
        summary.userId, format_date(summary.timestamp), summary.time,
        format_duration(summary.duration), summary.login, summary.actions,
        summary.rating, summary.output, summary.sms, summary.channel_change,
        summary.from_beginning, summary.tv_info, summary.recommendation,
        summary.search, summary.wifi, summary.survey_id
    ]


def build_visits_frame(summaries: Iterable[VisitSummary]) -> pd.DataFrame:
    return pd.DataFrame([summary_row(summary) for summary in summaries], columns=REPORT_COLUMNS)


def build_survey_frame(table: SurveyTable) -> pd.DataFrame:
    return pd.DataFrame([list(row) for row in table.rows], dtype=object)


def write_report(
    summaries: List[VisitSummary],
    survey: SurveyTable,
    output_path: str | Path
) -> Path:
    """
    Write the report workbook, replacing any existing file at ``output_path``.

    Returns:
        Path of the written file
    """
    path = Path(output_path)
    logger.info(f'Generating XLSX with {len(summaries)} visits at {path}')

    visits = build_visits_frame(summaries)
    with pd.ExcelWriter(path, engine='openpyxl', mode='w') as xls:
        visits.to_excel(xls, sheet_name=VISITS_SHEET, index=False)
        if survey.loaded:
            build_survey_frame(survey).to_excel(xls, sheet_name=SURVEY_SHEET, index=False, header=False)

    logger.info('Done')
    return path
