from attr import dataclass, field

SURVEY_ID_COLUMN = 0
SURVEY_TIMESTAMP_COLUMN = 7
SURVEY_HEADER_ROWS = 2


@dataclass(slots=True, frozen=True)
class SurveyTable:
    rows: tuple[tuple[str, ...], ...] = field(default=((),))
    source: str | None = None

    @property
    def loaded(self) -> bool:
        return self.source is not None

    @property
    def records(self) -> tuple[tuple[str, ...], ...]:
        """Rows after the header block."""
        return self.rows[SURVEY_HEADER_ROWS:]
