from pydantic import BaseModel, computed_field
from typing import List, Optional
from datetime import datetime

from api_pydantic_models.standings import UNKNOWN_LABEL, DriverStanding, ConstructorStanding


class RaceInfo(BaseModel):
    session_key: int
    location: str
    date_start: datetime
    country_name: Optional[str] = None


class RaceResultEntry(BaseModel):
    driver_number: int
    position: Optional[int] = None
    time_ms: Optional[int] = None
    points: int = 0
    full_name: Optional[str] = None
    team_name: Optional[str] = None
    team_colour: Optional[str] = None
    roster_match: bool = True

    @computed_field
    @property
    def finished(self) -> bool:
        return self.position is not None

    @computed_field
    @property
    def display_name(self) -> str:
        return self.full_name or UNKNOWN_LABEL

    @computed_field
    @property
    def display_team(self) -> str:
        return self.team_name or UNKNOWN_LABEL


class GetCurrentRaceResponse(BaseModel):
    race: Optional[RaceInfo] = None
    results: List[RaceResultEntry] = []


class GetDashboardResponse(BaseModel):
    season: int
    current_race: GetCurrentRaceResponse
    driver_standings: List[DriverStanding]
    constructor_standings: List[ConstructorStanding]
    last_updated: datetime
