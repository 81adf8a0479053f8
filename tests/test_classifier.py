import pytest

from meetaura_stats.domain.entities.event import (
    IgnoredEvent, IntentEvent, RatingEvent, SessionEvent, SmsRequestEvent,
    UserTypeEvent, WifiEvent, parse_action
)
from meetaura_stats.domain.entities.visit import Visit, Visitor
from meetaura_stats.services.visit_classifier import classify_visitors, summarize_visit


def make_visit(*actions, duration=0, ts=1493892000):
    return Visit(
        serverTimestamp=ts,
        serverTimePretty='10:00:00',
        visitDuration=duration,
        actions=tuple(parse_action(raw) for raw in actions),
    )


def event(category, name=None, value=None):
    raw = {'type': 'event', 'eventAction': category}
    if name is not None:
        raw['eventName'] = name
    if value is not None:
        raw['eventValue'] = value
    return raw


class TestParseAction:
    def test_known_categories(self):
        assert parse_action(event('user_type', 'login_real')) == UserTypeEvent(name='login_real')
        assert parse_action(event('session', value='42')) == SessionEvent(value=42.0)
        assert parse_action(event('sms_requesting', 'accepted')) == SmsRequestEvent(name='accepted')
        assert parse_action(event('valoration', value=4)) == RatingEvent(value=4)
        assert parse_action(event('wifi', 'goodbye')) == WifiEvent(name='goodbye')
        assert parse_action(event('intent', 'tv_search')) == IntentEvent(name='tv_search')

    def test_unknown_category_is_ignored(self):
        assert parse_action(event('pageview', 'x')) == IgnoredEvent(category='pageview')

    @pytest.mark.parametrize('raw', [None, 'garbage', 12, [], {'type': 'action'}])
    def test_garbage_is_ignored(self, raw):
        assert isinstance(parse_action(raw), IgnoredEvent)

    def test_non_numeric_session_value(self):
        assert parse_action(event('session', value='abc')) == SessionEvent(value=None)


class TestSummarizeVisit:
    def test_defaults(self):
        summary = summarize_visit('u1', make_visit())
        assert summary.userId == 'u1'
        assert summary.timestamp == 1493892000
        assert summary.time == '10:00:00'
        assert summary.duration == 0
        assert summary.login == 'N/A'
        assert summary.actions == 0
        assert summary.rating == 'N/A'
        assert summary.output == 'N/A'
        assert summary.sms == 'N/A'
        assert summary.survey_id == ''

    def test_login_real(self):
        assert summarize_visit('u', make_visit(event('user_type', 'login_real'))).login == 'REAL'

    def test_login_archetype(self):
        assert summarize_visit('u', make_visit(event('user_type', 'archetype_3'))).login == 'ARQUETIPO'

    def test_login_without_name_is_archetype(self):
        assert summarize_visit('u', make_visit(event('user_type'))).login == 'ARQUETIPO'

    def test_session_value(self):
        summary = summarize_visit('u', make_visit(event('session', value=125), duration=300))
        assert summary.duration == 125

    def test_session_falls_back_to_visit_duration(self):
        summary = summarize_visit('u', make_visit(event('session', value=0), duration=300))
        assert summary.duration == 300

    def test_session_without_any_duration(self):
        assert summarize_visit('u', make_visit(event('session'))).duration == 0

    def test_visit_duration_needs_session_event(self):
        assert summarize_visit('u', make_visit(duration=300)).duration == 0

    @pytest.mark.parametrize('name, expected', [('accepted', 'Si'), ('rejected', 'No'), (None, 'No')])
    def test_sms(self, name, expected):
        assert summarize_visit('u', make_visit(event('sms_requesting', name))).sms == expected

    def test_rating(self):
        assert summarize_visit('u', make_visit(event('valoration', value=4))).rating == '4'
        assert summarize_visit('u', make_visit(event('valoration', value='great'))).rating == 'great'
        assert summarize_visit('u', make_visit(event('valoration', value=4.0))).rating == '4'

    def test_rating_without_value(self):
        assert summarize_visit('u', make_visit(event('valoration'))).rating == 'N/A'

    def test_wifi_goodbye(self):
        assert summarize_visit('u', make_visit(event('wifi', 'goodbye'))).output == 'WIFI'
        assert summarize_visit('u', make_visit(event('wifi', 'hello'))).output == 'N/A'

    @pytest.mark.parametrize('name, counter', [
        ('desco_change_channel', 'channel_change'),
        ('desco_from_beginning', 'from_beginning'),
        ('tv_search', 'search'),
        ('tv_profiling', 'recommendation'),
        ('desco_info', 'tv_info'),
        ('wifi_info', 'wifi'),
        ('wifi_connect', 'wifi'),
    ])
    def test_intent_counters(self, name, counter):
        summary = summarize_visit('u', make_visit(event('intent', name), event('intent', name)))
        assert getattr(summary, counter) == 2
        assert summary.actions == 2

    def test_wifi_intent_forces_wifi_output(self):
        assert summarize_visit('u', make_visit(event('intent', 'wifi_info'))).output == 'WIFI'
        assert summarize_visit('u', make_visit(event('intent', 'wifi_connect'))).output == 'WIFI'

    def test_goodbye_intent_is_not_counted(self):
        summary = summarize_visit('u', make_visit(event('intent', 'goodbye')))
        assert summary.output == 'BYE'
        assert summary.actions == 0

    def test_unknown_intent_has_no_effect(self):
        summary = summarize_visit('u', make_visit(event('intent', 'dance'), event('intent')))
        assert summary.actions == 0
        assert summary.output == 'N/A'

    def test_last_write_wins(self):
        summary = summarize_visit('u', make_visit(
            event('user_type', 'login_real'),
            event('intent', 'goodbye'),
            event('user_type', 'archetype'),
            event('wifi', 'goodbye'),
        ))
        assert summary.login == 'ARQUETIPO'
        assert summary.output == 'WIFI'

    def test_action_count_matches_counted_intents(self):
        summary = summarize_visit('u', make_visit(
            event('intent', 'desco_info'),
            event('intent', 'goodbye'),
            event('intent', 'tv_search'),
            event('session', value=10),
            event('intent', 'tv_profiling'),
            'garbage',
        ))
        assert summary.actions == 3
        assert summary.tv_info == summary.search == summary.recommendation == 1


class TestClassifyVisitors:
    def test_one_summary_per_visit_in_order(self):
        visitors = [
            Visitor(userId='a', visits=(make_visit(ts=3), make_visit(ts=1))),
            Visitor(userId='b', visits=()),
            Visitor(userId='c', visits=(make_visit(ts=2),)),
        ]
        summaries = classify_visitors(visitors)
        assert [(s.userId, s.timestamp) for s in summaries] == [('a', 3), ('a', 1), ('c', 2)]

    def test_idempotent(self):
        visitors = [Visitor(userId='a', visits=(make_visit(event('intent', 'desco_info')),))]
        assert classify_visitors(visitors) == classify_visitors(visitors)

    def test_two_visitor_scenario(self):
        visitors = [
            Visitor(userId='A', visits=(make_visit(event('intent', 'desco_info')),)),
            Visitor(userId='B', visits=(make_visit(event('intent', 'goodbye')),)),
        ]
        row_a, row_b = classify_visitors(visitors)
        assert (row_a.tv_info, row_a.actions, row_a.output) == (1, 1, 'N/A')
        assert (row_b.actions, row_b.output) == (0, 'BYE')
