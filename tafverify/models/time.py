"""Report time models for METAR observations and TAF validity windows."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field

MINUTES_PER_DAY = 24 * 60


class ReportTime(BaseModel):
    """Day-of-month, hour and minute as carried on the wire (no month or year)."""

    model_config = ConfigDict(frozen=True)

    day: int = Field(..., ge=1, le=31, description="Day of month")
    hour: int = Field(..., ge=0, le=24, description="Hour (UTC); 24 only for end-of-day validity")
    minute: int = Field(default=0, ge=0, le=59, description="Minute (UTC)")

    @property
    def minutes(self) -> int:
        """Ordinal minutes counted from day zero of the month."""

        return self.day * MINUTES_PER_DAY + self.hour * 60 + self.minute

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return f"{self.day:02d}{self.hour:02d}{self.minute:02d}Z"


class ValidityPeriod(BaseModel):
    """Inclusive forecast validity window at hour granularity."""

    model_config = ConfigDict(frozen=True)

    start: ReportTime = Field(..., description="Start of validity")
    end: ReportTime = Field(..., description="End of validity")


__all__ = ["MINUTES_PER_DAY", "ReportTime", "ValidityPeriod"]
