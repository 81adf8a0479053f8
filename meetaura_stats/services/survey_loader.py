"""
Survey file loading.
"""

import asyncio
import csv
import io
import logging
from pathlib import Path
from typing import Optional

from meetaura_stats.domain.entities.survey import SurveyTable
from meetaura_stats.errors import SurveyLoadError

logger = logging.getLogger(__name__)


def parse_survey(text: str, delimiter: str = ',') -> tuple[tuple[str, ...], ...]:
    """Split delimited text into rows of verbatim text fields."""
    reader = csv.reader(io.StringIO(text, newline=''), delimiter=delimiter, strict=True)
    return tuple(tuple(row) for row in reader)


def read_survey(path: Path, delimiter: str = ',', encoding: str = 'utf-8-sig') -> SurveyTable:
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SurveyLoadError(f'cannot read {path}: {e}') from e

    try:
        rows = parse_survey(text, delimiter)
    except csv.Error as e:
        raise SurveyLoadError(f'cannot parse {path}: {e}') from e

    logger.info(f'Loaded {len(rows)} survey rows from {path}')
    return SurveyTable(rows=rows or ((),), source=str(path))


async def load_survey(
    path: Optional[str],
    delimiter: str = ',',
    encoding: str = 'utf-8-sig'
) -> SurveyTable:
    """
    Load the survey table, or an empty one when no path is given.

    Raises:
        SurveyLoadError: If the file cannot be read or parsed
    """
    if not path:
        return SurveyTable()
    return await asyncio.to_thread(read_survey, Path(path), delimiter, encoding)
