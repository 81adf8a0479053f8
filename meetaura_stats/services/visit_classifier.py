"""
Visit Classification Service.
Folds the event log of every visit into one VisitSummary.
"""

import logging
from typing import Iterable, List

from meetaura_stats.domain.entities.event import (
    ActionEvent, IgnoredEvent, IntentEvent, RatingEvent, SessionEvent,
    SmsRequestEvent, UserTypeEvent, WifiEvent
)
from meetaura_stats.domain.entities.summary import (
    LOGIN_ARCHETYPE, LOGIN_REAL, NOT_AVAILABLE, OUTPUT_BYE, OUTPUT_WIFI,
    SMS_ACCEPTED, SMS_REJECTED, VisitSummary
)
from meetaura_stats.domain.entities.visit import Visit, Visitor

logger = logging.getLogger(__name__)

REAL_LOGIN_MARKER = 'login_real'
SMS_ACCEPTED_MARKER = 'accepted'
GOODBYE_MARKER = 'goodbye'

# intent sub-tag -> counter it increments
INTENT_COUNTERS = {
    'desco_change_channel': 'channel_change',
    'desco_from_beginning': 'from_beginning',
    'tv_search': 'search',
    'tv_profiling': 'recommendation',
    'desco_info': 'tv_info',
    'wifi_info': 'wifi',
    'wifi_connect': 'wifi',
}
WIFI_INTENTS = frozenset({'wifi_info', 'wifi_connect'})


def _rating_text(value) -> str:
    if value is None or value == '':
        return NOT_AVAILABLE
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _session_duration(event: SessionEvent, visit: Visit) -> float:
    if event.value:
        return int(event.value) if event.value.is_integer() else event.value
    return visit.visitDuration or 0


def summarize_visit(user_id: str, visit: Visit) -> VisitSummary:
    """Classify one visit. Later events overwrite scalar fields, counters add up."""
    fields = {
        'duration': 0,
        'login': NOT_AVAILABLE,
        'actions': 0,
        'rating': NOT_AVAILABLE,
        'output': NOT_AVAILABLE,
        'sms': NOT_AVAILABLE,
        'channel_change': 0,
        'from_beginning': 0,
        'tv_info': 0,
        'recommendation': 0,
        'search': 0,
        'wifi': 0,
    }

    for event in visit.actions:
        _apply_event(fields, event, visit)

    return VisitSummary(
        userId=user_id,
        timestamp=visit.serverTimestamp,
        time=visit.serverTimePretty,
        **fields
    )


def _apply_event(fields: dict, event: ActionEvent, visit: Visit) -> None:
    match event:
        case UserTypeEvent(name=name):
            fields['login'] = LOGIN_REAL if name == REAL_LOGIN_MARKER else LOGIN_ARCHETYPE

        case SessionEvent():
            fields['duration'] = _session_duration(event, visit)

        case SmsRequestEvent(name=name):
            fields['sms'] = SMS_ACCEPTED if name == SMS_ACCEPTED_MARKER else SMS_REJECTED

        case RatingEvent(value=value):
            fields['rating'] = _rating_text(value)

        case WifiEvent(name=name):
            if name == GOODBYE_MARKER:
                fields['output'] = OUTPUT_WIFI

        case IntentEvent(name=name):
            if name == GOODBYE_MARKER:
                fields['output'] = OUTPUT_BYE
            elif name in INTENT_COUNTERS:
                fields[INTENT_COUNTERS[name]] += 1
                fields['actions'] += 1
                if name in WIFI_INTENTS:
                    fields['output'] = OUTPUT_WIFI

        case IgnoredEvent():
            pass


def summarize_visitor(visitor: Visitor) -> List[VisitSummary]:
    return [summarize_visit(visitor.userId, visit) for visit in visitor.visits]


def classify_visitors(visitors: Iterable[Visitor]) -> List[VisitSummary]:
    """
    Summaries for all visits, in visitor order then visit order.
    Pure: the same visitors always give the same summaries.
    """
    summaries = []
    for visitor in visitors:
        summaries.extend(summarize_visitor(visitor))
    logger.info(f'Classified {len(summaries)} visits')
    return summaries
