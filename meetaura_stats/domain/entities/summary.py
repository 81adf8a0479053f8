from typing import Optional

import attr
from attr import dataclass

NOT_AVAILABLE = 'N/A'

LOGIN_REAL = 'REAL'
LOGIN_ARCHETYPE = 'ARQUETIPO'

OUTPUT_WIFI = 'WIFI'
OUTPUT_BYE = 'BYE'

SMS_ACCEPTED = 'Si'
SMS_REJECTED = 'No'


@dataclass(slots=True, frozen=True)
class VisitSummary:
    userId: str
    timestamp: int
    time: str
    duration: float = 0
    login: str = NOT_AVAILABLE
    actions: int = 0
    rating: str = NOT_AVAILABLE
    output: str = NOT_AVAILABLE
    sms: str = NOT_AVAILABLE
    channel_change: int = 0
    from_beginning: int = 0
    tv_info: int = 0
    recommendation: int = 0
    search: int = 0
    wifi: int = 0
    survey_id: str = ''

    def with_survey(self, survey_id: Optional[str]) -> 'VisitSummary':
        return attr.evolve(self, survey_id=survey_id or '')


class SummaryAccumulator:
    """Ordered collection of summaries for one report run."""

    def __init__(self):
        self._summaries: list[VisitSummary] = []

    def extend(self, summaries: list[VisitSummary]) -> None:
        self._summaries.extend(summaries)

    def __iter__(self):
        return iter(self._summaries)

    def __len__(self) -> int:
        return len(self._summaries)

    @property
    def summaries(self) -> list[VisitSummary]:
        return list(self._summaries)
