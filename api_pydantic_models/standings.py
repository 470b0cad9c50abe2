"""
Pydantic models for championship standings responses.
roster_match is False when the driver number was missing from the roster; the
name and team fields are then None. A matched driver may still have None fields
when OpenF1 left them out.
"""
from pydantic import BaseModel, Field, computed_field
from typing import List, Optional
from datetime import datetime

UNKNOWN_LABEL = "Unknown"


class DriverStanding(BaseModel):
    driver_number: int
    full_name: Optional[str] = None
    team_name: Optional[str] = None
    team_colour: Optional[str] = None
    roster_match: bool = True
    points: int = Field(0, ge=0)
    wins: int = Field(0, ge=0)
    rank: int = Field(..., ge=1)

    @computed_field
    @property
    def display_name(self) -> str:
        return self.full_name or UNKNOWN_LABEL

    @computed_field
    @property
    def display_team(self) -> str:
        return self.team_name or UNKNOWN_LABEL


class ConstructorStanding(BaseModel):
    team_name: Optional[str] = None
    team_colour: Optional[str] = None
    roster_match: bool = True
    points: int = Field(0, ge=0)
    wins: int = Field(0, ge=0)
    rank: int = Field(..., ge=1)

    @computed_field
    @property
    def display_team(self) -> str:
        return self.team_name or UNKNOWN_LABEL


class GetDriverStandingsResponse(BaseModel):
    season: int
    standings: List[DriverStanding]


class GetConstructorStandingsResponse(BaseModel):
    season: int
    standings: List[ConstructorStanding]


class StandingsSnapshot(BaseModel):
    """Both tables computed from the same results and roster."""
    drivers: List[DriverStanding]
    constructors: List[ConstructorStanding]
    computed_at: datetime
