from pydantic import BaseModel, ConfigDict
from typing import Optional

class DriverInfo(BaseModel):
    # https://openf1.org/#drivers
    model_config = ConfigDict(extra="ignore")

    driver_number: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    team_name: Optional[str] = None
    name_acronym: Optional[str] = None
    team_colour: Optional[str] = None
    session_key: Optional[int] = None

    @property
    def full_name(self) -> Optional[str]:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or None
