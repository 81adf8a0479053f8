import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from meetaura_stats.errors import ReportError
from meetaura_stats.reporting.config import load_config
from meetaura_stats.reporting.orchestrator import ReportOrchestrator

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='meetaura-stats',
        description='Build the XLSX visit report from Piwik'
    )
    parser.add_argument('-q', dest='survey', metavar='SURVEY',
                        help='CSV survey file to join with the visits')
    parser.add_argument('-o', '--output', dest='output',
                        help='Report path (default: OUTPUT_PATH or meetaura-stats.xlsx)')
    return parser


async def generate(survey: Optional[str] = None, output: Optional[str] = None, config=None):
    config = config or load_config()
    async with ReportOrchestrator(config) as orchestrator:
        return await orchestrator.run(survey_path=survey, output_path=output)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except ReportError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(str(e))
        return 1

    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)

    try:
        path = asyncio.run(generate(args.survey, args.output, config))
    except ReportError as e:
        logger.error(str(e))
        return 1

    logger.info(f'Report written to {path}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
