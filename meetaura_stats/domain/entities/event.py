"""
Action events recorded inside a visit.

Piwik reports every tracked event as a loose record keyed by ``eventAction``
(the category), ``eventName`` (the sub-tag) and ``eventValue``. Each category
the report cares about gets its own variant; everything else is an
``IgnoredEvent``.
"""

from typing import Any, Optional, Union

from attr import dataclass


@dataclass(slots=True, frozen=True)
class UserTypeEvent:
    name: Optional[str] = None


@dataclass(slots=True, frozen=True)
class SessionEvent:
    value: Optional[float] = None


@dataclass(slots=True, frozen=True)
class SmsRequestEvent:
    name: Optional[str] = None


@dataclass(slots=True, frozen=True)
class RatingEvent:
    value: Any = None


@dataclass(slots=True, frozen=True)
class WifiEvent:
    name: Optional[str] = None


@dataclass(slots=True, frozen=True)
class IntentEvent:
    name: Optional[str] = None


@dataclass(slots=True, frozen=True)
class IgnoredEvent:
    category: Optional[str] = None


ActionEvent = Union[
    UserTypeEvent,
    SessionEvent,
    SmsRequestEvent,
    RatingEvent,
    WifiEvent,
    IntentEvent,
    IgnoredEvent,
]


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _as_number(value: Any) -> Optional[float]:
    """Piwik sends event values as numbers or numeric strings."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_action(raw: Any) -> ActionEvent:
    """Build the event variant for one raw ``actionDetails`` entry."""
    if not isinstance(raw, dict):
        return IgnoredEvent()

    category = raw.get('eventAction')
    name = _as_text(raw.get('eventName'))
    value = raw.get('eventValue')

    if category == 'user_type':
        return UserTypeEvent(name=name)
    if category == 'session':
        return SessionEvent(value=_as_number(value))
    if category == 'sms_requesting':
        return SmsRequestEvent(name=name)
    if category == 'valoration':
        return RatingEvent(value=value)
    if category == 'wifi':
        return WifiEvent(name=name)
    if category == 'intent':
        return IntentEvent(name=name)
    return IgnoredEvent(category=_as_text(category))
