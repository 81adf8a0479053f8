"""
Data models for the Piwik API responses consumed by the report
"""

from typing import List, Optional, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from meetaura_stats.domain.entities.event import parse_action
from meetaura_stats.domain.entities.visit import Visit, Visitor


class PiwikUser(BaseModel):
    """Entry of UserId.getUsers"""
    model_config = ConfigDict(extra="ignore")

    idvisitor: str
    label: Optional[str] = None

    @field_validator("idvisitor", "label", mode="before")
    @classmethod
    def _to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value


class VisitDetails(BaseModel):
    """One entry of a profile's lastVisits"""
    model_config = ConfigDict(extra="ignore")

    serverTimestamp: int = 0
    serverTimePretty: str = ""
    visitDuration: int = 0
    actionDetails: List[Any] = Field(default_factory=list)

    @field_validator("serverTimestamp", "visitDuration", mode="before")
    @classmethod
    def _none_to_zero(cls, value: Any) -> Any:
        return 0 if value in (None, "") else value

    @field_validator("serverTimePretty", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("actionDetails", mode="before")
    @classmethod
    def _actions_as_list(cls, value: Any) -> Any:
        # Piwik serializes empty tables as {} on some versions
        if value is None or isinstance(value, dict):
            return []
        return value

    def to_visit(self) -> Visit:
        return Visit(
            serverTimestamp=self.serverTimestamp,
            serverTimePretty=self.serverTimePretty,
            visitDuration=self.visitDuration,
            actions=tuple(parse_action(raw) for raw in self.actionDetails),
        )


class VisitorProfile(BaseModel):
    """Response of Live.getVisitorProfile"""
    model_config = ConfigDict(extra="ignore")

    userId: Optional[str] = None
    lastVisits: List[VisitDetails] = Field(default_factory=list)

    @field_validator("userId", mode="before")
    @classmethod
    def _user_id_to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("lastVisits", mode="before")
    @classmethod
    def _visits_as_list(cls, value: Any) -> Any:
        if value is None or isinstance(value, dict):
            return []
        return value

    def to_visitor(self, fallback_id: str = "") -> Visitor:
        return Visitor(
            userId=self.userId or fallback_id,
            visits=tuple(visit.to_visit() for visit in self.lastVisits),
        )
