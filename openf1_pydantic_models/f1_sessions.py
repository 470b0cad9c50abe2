from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional, Union


class F1Session(BaseModel):
    # https://openf1.org/#sessions
    model_config = ConfigDict(extra="ignore")

    session_key: int
    location: str
    date_start: datetime
    session_name: Optional[str] = None
    session_type: Optional[str] = None
    country_name: Optional[str] = None
    circuit_short_name: Optional[str] = None
    meeting_key: Optional[int] = None
    year: Optional[int] = None


class F1SessionResult(BaseModel):
    # https://openf1.org/#session-result
    model_config = ConfigDict(extra="ignore")

    session_key: int
    driver_number: int

    # 'position' is None for drivers that did not finish
    position: Union[int, None] = None

    # 'duration' is the race time in seconds, None when not classified
    duration: Union[float, None] = None

    dnf: bool = False
    dns: bool = False
    dsq: bool = False
    number_of_laps: Optional[int] = None

    @property
    def time_ms(self) -> Optional[int]:
        if self.duration is None:
            return None
        return int(round(self.duration * 1000))
