from attr import dataclass

from meetaura_stats.domain.entities.event import ActionEvent


@dataclass(slots=True, frozen=True)
class Visit:
    serverTimestamp: int
    serverTimePretty: str
    visitDuration: int
    actions: tuple[ActionEvent, ...] = ()


@dataclass(slots=True, frozen=True)
class Visitor:
    userId: str
    visits: tuple[Visit, ...] = ()
