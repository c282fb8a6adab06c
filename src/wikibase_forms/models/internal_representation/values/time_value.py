import re
from datetime import date
from typing import Any

from pydantic import ConfigDict, Field, field_validator
from typing_extensions import Literal

from .base import Value

GREGORIAN_CALENDAR = "http://www.wikidata.org/entity/Q1985727"
DAY_PRECISION = 11
ENTERED_DATE_PATTERN = re.compile(r"^(-)?(\d{4})-(\d{2})-(\d{2})$")


class TimeValue(Value):
    kind: Literal["time"] = Field(default="time", frozen=True)
    value: str
    datatype_uri: str = "http://wikiba.se/ontology#Time"
    timezone: int = 0
    before: int = 0
    after: int = 0
    precision: int = Field(default=DAY_PRECISION, ge=0, le=14)
    calendarmodel: str = GREGORIAN_CALENDAR

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_date(cls, entered: str) -> "TimeValue":
        """Day-precision value at midnight UTC from an ISO date (YYYY-MM-DD).

        Years before the common era are entered with a leading minus sign,
        as the query service returns them (-0500-03-15). Year 0 does not exist.
        """
        entered = entered.strip()
        match = ENTERED_DATE_PATTERN.match(entered)
        if not match:
            raise ValueError(f"Date must be in format YYYY-MM-DD, got: {entered}")
        sign, year, month, day = match.groups()
        try:
            # BCE days are checked against a leap year
            date(2000 if sign else int(year), int(month), int(day))
        except ValueError:
            raise ValueError(f"Date must be in format YYYY-MM-DD, got: {entered}")
        if sign and int(year) == 0:
            raise ValueError(f"Year 0 does not exist, got: {entered}")
        return cls(value=f"{sign or '+'}{year}-{month}-{day}T00:00:00Z")

    @field_validator("value")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        if not (v.startswith("+") or v.startswith("-")):
            v = "+" + v

        pattern = re.compile(r'^[+-][0-9]{1,16}-(?:1[0-2]|0[0-9])-(?:3[01]|0[0-9]|[12][0-9])T(?:2[0-3]|[01][0-9]):[0-5][0-9]:[0-5][0-9]Z$')
        if not pattern.match(v):
            raise ValueError(f"Time value must be in format '+%Y-%m-%dT%H:%M:%SZ', got: {v}")
        return v

    def to_datavalue(self) -> dict[str, Any]:
        return {
            "value": {
                "time": self.value,
                "timezone": self.timezone,
                "before": self.before,
                "after": self.after,
                "precision": self.precision,
                "calendarmodel": self.calendarmodel,
            },
            "type": "time",
        }
